# eeprommer/app/config.py
from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from eeprommer.core.errors import ConfigError

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EEPROMMER_CONFIG"
CONFIG_FILENAME = "config.yml"


@dataclass(frozen=True)
class EeprommerConfig:
    port: str = "COM1"
    baud_rate: int = 9600
    exchange_timeout_s: Optional[float] = 2.0
    handshake: bool = True
    handshake_timeout_s: Optional[float] = 3.0
    read_timeout_s: float = 0.05

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


_FIELD_TYPES = {
    "port": "str",
    "baud_rate": "int",
    "exchange_timeout_s": "optional_float",
    "handshake": "bool",
    "handshake_timeout_s": "optional_float",
    "read_timeout_s": "float",
}


def default_config_path() -> Path:
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return Path(base) / "eeprommer" / CONFIG_FILENAME


def cast_value(key: str, value: Any) -> Any:
    """
    Cast a raw value (from YAML or the command line) to the field's type.
    Strings are accepted for every type so `set` can pass argv through.
    """
    type_name = _FIELD_TYPES.get(key)
    if type_name is None:
        raise ConfigError(
            f"Unknown config key '{key}'.",
            hint=f"Valid keys: {', '.join(sorted(_FIELD_TYPES))}",
            details={"key": key},
        )

    try:
        if type_name == "str":
            if value is None or str(value).strip() == "":
                raise ValueError("must not be empty")
            return str(value)

        if type_name == "int":
            if isinstance(value, bool):
                raise TypeError(f"Expected int, got {type(value).__name__}")
            v = int(value, 0) if isinstance(value, str) else int(value)
            if v <= 0:
                raise ValueError("must be positive")
            return v

        if type_name in ("float", "optional_float"):
            if type_name == "optional_float" and (value is None or str(value).strip().lower() in ("none", "null", "")):
                return None
            if isinstance(value, bool):
                raise TypeError(f"Expected float, got {type(value).__name__}")
            v = float(value)
            if v <= 0:
                raise ValueError("must be positive")
            return v

        if type_name == "bool":
            if isinstance(value, bool):
                return value
            s = str(value).strip().lower()
            if s in ("1", "true", "yes", "on"):
                return True
            if s in ("0", "false", "no", "off"):
                return False
            raise ValueError(f"Invalid bool literal '{value}' (use true/false)")
    except (TypeError, ValueError) as e:
        raise ConfigError(
            f"Invalid value for config key '{key}'.",
            hint=str(e),
            details={"key": key, "value": value, "expected_type": type_name},
        ) from None

    raise ConfigError(f"Unknown schema type '{type_name}'")  # pragma: no cover


class ConfigStore:
    """Load/save EeprommerConfig as a flat YAML mapping."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else default_config_path()

    def load(self) -> EeprommerConfig:
        """Read the config file; a missing or unreadable file yields defaults."""
        try:
            with self.path.open("r", encoding="utf-8") as f:
                doc = yaml.safe_load(f) or {}
        except FileNotFoundError:
            return EeprommerConfig()
        except (OSError, yaml.YAMLError) as e:
            log.warning("CONFIG_READ_FAILED path=%s err=%s", self.path, e)
            return EeprommerConfig()

        if not isinstance(doc, dict):
            log.warning("CONFIG_NOT_A_MAPPING path=%s", self.path)
            return EeprommerConfig()

        values: Dict[str, Any] = {}
        for key, raw in doc.items():
            try:
                values[str(key)] = cast_value(str(key), raw)
            except ConfigError as e:
                log.warning("CONFIG_VALUE_IGNORED key=%s err=%s", key, e.hint or e.message)
        return EeprommerConfig(**values)

    def save(self, cfg: EeprommerConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(cfg.as_dict(), f, sort_keys=True)
        log.info("CONFIG_SAVED path=%s", self.path)

    def get(self, key: str) -> Any:
        cfg = self.load()
        if key not in {f.name for f in fields(cfg)}:
            raise ConfigError(
                f"Unknown config key '{key}'.",
                hint=f"Valid keys: {', '.join(sorted(_FIELD_TYPES))}",
                details={"key": key},
            )
        return getattr(cfg, key)

    def set(self, key: str, value: Any) -> EeprommerConfig:
        cfg = replace(self.load(), **{key: cast_value(key, value)})
        self.save(cfg)
        return cfg
