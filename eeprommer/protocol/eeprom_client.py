# eeprommer/protocol/eeprom_client.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from eeprommer.core.errors import InvalidArgument, VerificationMismatch

from .core import messages
from .core.defs import ADDRESS_MASK, DUMP_SIZE, MAX_LOAD_SIZE
from .engine import ExchangeEngine
from .errors import PayloadTooLarge

ProgressCallback = Callable[[float], None]  # fraction in [0, 1]


def check_address(address: int) -> int:
    if isinstance(address, bool) or not isinstance(address, int) or not 0 <= address <= ADDRESS_MASK:
        raise InvalidArgument(
            f"Address {address!r} is out of range.",
            hint=f"Use a 15-bit address, 0..{ADDRESS_MASK} (0x0000..0x{ADDRESS_MASK:04x}).",
            details={"address": address},
        )
    return address


def check_byte(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise InvalidArgument(
            f"Byte value {value!r} is out of range.",
            hint="Use a single byte, 0..255 (0x00..0xff).",
            details={"value": value},
        )
    return value


class EepromClient:
    """
    User-facing API over ExchangeEngine: single-byte access plus the bulk
    load/dump algorithms.
    """

    def __init__(self, engine: ExchangeEngine, *, logger: Optional[logging.Logger] = None):
        self._engine = engine
        self._log = logger or logging.getLogger(__name__)

    # ---------------- single byte ----------------
    def read(self, address: int) -> int:
        check_address(address)
        payload = self._engine.send_expect_data(messages.read(address))
        return payload[0]

    def write(self, address: int, value: int) -> bool:
        """Write one byte, read it back, and report whether it stuck."""
        check_address(address)
        check_byte(value)
        actual = self._write_and_read_back(address, value)
        if actual != value:
            self._log.warning("WRITE_VERIFY_MISMATCH address=0x%04x expected=0x%02x actual=0x%02x",
                              address, value, actual)
            return False
        return True

    def write_checked(self, address: int, value: int) -> None:
        """Like write(), but raise VerificationMismatch on a bad read-back."""
        check_address(address)
        check_byte(value)
        actual = self._write_and_read_back(address, value)
        if actual != value:
            raise VerificationMismatch(address=address, expected=value, actual=actual)

    def _write_and_read_back(self, address: int, value: int) -> int:
        self._engine.send_expect_ack(messages.write(address, value))
        payload = self._engine.send_expect_data(messages.read(address))
        return payload[0]

    def reset(self) -> None:
        self._engine.send_expect_ack(messages.reset())

    # ---------------- bulk ----------------
    def load(self, data: bytes, progress: Optional[ProgressCallback] = None) -> None:
        """
        Upload `data` to the EEPROM starting at address 0.

        Every frame (header first) must be acknowledged before the next one
        goes out; the first failure aborts the whole upload.
        """
        data = bytes(data)
        if len(data) > MAX_LOAD_SIZE:
            raise PayloadTooLarge(len(data), MAX_LOAD_SIZE)

        frames = messages.load(data)
        total = len(data)
        sent = 0
        self._log.info("LOAD_START bytes=%d frames=%d", total, len(frames))

        for idx, frame in enumerate(frames):
            self._engine.send_expect_ack(frame)
            if idx > 0:
                sent += frame[0]
            if progress is not None:
                progress(sent / total)

        self._log.info("LOAD_DONE bytes=%d", sent)

    def dump(self, progress: Optional[ProgressCallback] = None) -> bytes:
        """Read back the full memory image (DUMP_SIZE bytes)."""
        self._log.info("DUMP_START bytes=%d", DUMP_SIZE)
        buf = bytearray(self._engine.send_expect_data(messages.dump()))
        if progress is not None:
            progress(min(len(buf), DUMP_SIZE) / DUMP_SIZE)

        while len(buf) < DUMP_SIZE:
            buf += self._engine.send_expect_data(messages.ack())
            if progress is not None:
                progress(min(len(buf), DUMP_SIZE) / DUMP_SIZE)

        # Tell the device we have everything; it sends nothing back.
        self._engine.send_without_response(messages.ack())

        if len(buf) != DUMP_SIZE:
            self._log.warning("DUMP_OVERRUN bytes=%d expected=%d", len(buf), DUMP_SIZE)
        self._log.info("DUMP_DONE bytes=%d", len(buf))
        return bytes(buf)

    def validate(self, data: bytes, progress: Optional[ProgressCallback] = None) -> bool:
        """Dump the EEPROM and compare its prefix with `data`."""
        data = bytes(data)
        image = self.dump(progress=progress)
        ok = image[:len(data)] == data
        if not ok:
            first = next((i for i, (a, b) in enumerate(zip(data, image)) if a != b), len(image))
            self._log.warning("VALIDATE_MISMATCH first_offset=0x%04x", first)
        return ok
