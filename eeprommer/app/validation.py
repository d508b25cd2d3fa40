# eeprommer/app/validation.py
from __future__ import annotations

from eeprommer.core.errors import InvalidArgument
from eeprommer.protocol.eeprom_client import check_address, check_byte


def parse_int(text: str, what: str) -> int:
    """Parse decimal or 0x-prefixed hex (also 0o / 0b) command-line numbers."""
    try:
        return int(str(text).strip(), 0)
    except ValueError:
        raise InvalidArgument(
            f"{what} value '{text}' is not a number.",
            hint="Use decimal or hex, e.g. '31250' or '0x7a12'.",
            details={"value": text},
        ) from None


def parse_address(text: str) -> int:
    return check_address(parse_int(text, "address"))


def parse_byte(text: str) -> int:
    return check_byte(parse_int(text, "byte"))
