from __future__ import annotations

import pytest
import yaml

import eeprommer.app.config as config_mod
from eeprommer.app.config import ConfigStore, EeprommerConfig, cast_value
from eeprommer.core.errors import ConfigError


def test_missing_file_yields_defaults(tmp_path):
    store = ConfigStore(tmp_path / "nope.yml")
    assert store.load() == EeprommerConfig()


def test_set_persists_and_get_reads_back(tmp_path):
    path = tmp_path / "sub" / "config.yml"
    store = ConfigStore(path)

    cfg = store.set("port", "/dev/ttyUSB0")
    assert cfg.port == "/dev/ttyUSB0"
    assert path.exists()

    assert ConfigStore(path).get("port") == "/dev/ttyUSB0"
    doc = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert doc["port"] == "/dev/ttyUSB0"
    assert doc["baud_rate"] == 9600


def test_set_casts_values(tmp_path):
    store = ConfigStore(tmp_path / "c.yml")
    assert store.set("baud_rate", "0x2580").baud_rate == 9600
    assert store.set("handshake", "off").handshake is False
    assert store.set("exchange_timeout_s", "none").exchange_timeout_s is None
    assert store.set("read_timeout_s", "0.2").read_timeout_s == 0.2


@pytest.mark.parametrize(
    "key,value",
    [
        ("baud_rate", "fast"),
        ("baud_rate", "0"),
        ("baud_rate", True),
        ("handshake", "maybe"),
        ("read_timeout_s", "none"),
        ("exchange_timeout_s", "-1"),
        ("port", ""),
    ],
)
def test_cast_value_rejects_bad_values(key, value):
    with pytest.raises(ConfigError) as ei:
        cast_value(key, value)
    assert ei.value.details["key"] == key


def test_unknown_key_rejected(tmp_path):
    store = ConfigStore(tmp_path / "c.yml")
    with pytest.raises(ConfigError):
        store.get("colour")
    with pytest.raises(ConfigError):
        store.set("colour", "blue")


def test_bad_entries_in_file_are_ignored(tmp_path):
    path = tmp_path / "c.yml"
    path.write_text("port: COM7\nbaud_rate: lots\nmystery: 1\n", encoding="utf-8")

    cfg = ConfigStore(path).load()

    assert cfg.port == "COM7"
    assert cfg.baud_rate == 9600


@pytest.mark.parametrize("text", ["- just\n- a list\n", "port: [unclosed\n"])
def test_malformed_file_yields_defaults(tmp_path, text):
    path = tmp_path / "c.yml"
    path.write_text(text, encoding="utf-8")
    assert ConfigStore(path).load() == EeprommerConfig()


def test_default_path_honours_env(monkeypatch, tmp_path):
    monkeypatch.setenv(config_mod.CONFIG_ENV_VAR, str(tmp_path / "x.yml"))
    assert config_mod.default_config_path() == tmp_path / "x.yml"


def test_default_path_uses_xdg_config_home(monkeypatch, tmp_path):
    monkeypatch.delenv(config_mod.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert config_mod.default_config_path() == tmp_path / "eeprommer" / "config.yml"
