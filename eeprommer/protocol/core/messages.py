# eeprommer/protocol/core/messages.py
"""
Host → device message builders.

Every builder returns the complete wire frame (length prefix included).
Inputs are masked, not validated: range checks belong to the caller.
"""

from __future__ import annotations

import struct
from typing import List

from .defs import ADDRESS_MASK, BYTE_MASK, CHUNK_SIZE, MAX_LOAD_SIZE, Opcode
from ..errors import PayloadTooLarge


def _frame(payload: bytes) -> bytes:
    return bytes([len(payload)]) + payload


def _addr(address: int) -> bytes:
    return struct.pack(">H", int(address) & ADDRESS_MASK)


def decode_address(hi: int, lo: int) -> int:
    """Inverse of the 2-byte address encoding."""
    return ((hi << 8) | lo) & ADDRESS_MASK


def read(address: int) -> bytes:
    return _frame(bytes([Opcode.READ]) + _addr(address))


def write(address: int, value: int) -> bytes:
    return _frame(bytes([Opcode.WRITE]) + _addr(address) + bytes([int(value) & BYTE_MASK]))


def dump() -> bytes:
    return _frame(bytes([Opcode.DUMP]))


def load(data: bytes) -> List[bytes]:
    """
    Build the frame sequence that loads `data` starting at address 0.

    The first frame is the header (opcode + 16-bit total length); the rest
    carry raw chunks of at most CHUNK_SIZE bytes with no opcode.
    """
    data = bytes(data)
    if len(data) > MAX_LOAD_SIZE:
        raise PayloadTooLarge(len(data), MAX_LOAD_SIZE)
    if not data:
        return []

    header = _frame(bytes([Opcode.LOAD]) + struct.pack(">H", len(data) & 0xFFFF))
    chunks = [_frame(data[i:i + CHUNK_SIZE]) for i in range(0, len(data), CHUNK_SIZE)]
    return [header, *chunks]


def reset() -> bytes:
    return _frame(bytes([Opcode.RESET]))


def ack() -> bytes:
    return b"\x00"
