# eeprommer/protocol/core/defs.py
from __future__ import annotations

from enum import IntEnum


class Opcode(IntEnum):
    """First payload byte of a host → device command."""

    READ = 0x72
    WRITE = 0x77
    DUMP = 0x64
    LOAD = 0x6C
    RESET = 0x73


ADDRESS_BITS = 15
ADDRESS_MASK = (1 << ADDRESS_BITS) - 1  # 0x7FFF
BYTE_MASK = 0xFF

# Largest payload a single frame can carry (one length byte).
MAX_FRAME_PAYLOAD = 0xFF

# Load payloads are split into chunks of at most this many bytes.
CHUNK_SIZE = 32

# Device memory size: dump image length and load payload limit.
EEPROM_SIZE = 1 << ADDRESS_BITS  # 32768
DUMP_SIZE = EEPROM_SIZE
MAX_LOAD_SIZE = EEPROM_SIZE
