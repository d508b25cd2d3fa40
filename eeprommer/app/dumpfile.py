# eeprommer/app/dumpfile.py
"""
Dump/load file I/O.

Text dumps are hex listings, 16 bytes per row with an ASCII column, and a
blank line after every 16 rows:

    $0000 - $000f:  00 01 02 03 04 05 06 07  08 09 0a 0b 0c 0d 0e 0f  ........ ........
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from eeprommer.core.errors import InvalidArgument
from eeprommer.protocol.core.defs import MAX_LOAD_SIZE

ROW_SIZE = 16
HALF_ROW = 8
ROWS_PER_BLOCK = 16


def _hex(chunk: bytes) -> str:
    return " ".join(f"{b:02x}" for b in chunk)


def _ascii(chunk: bytes) -> str:
    return "".join(chr(b) if 32 < b < 127 else "." for b in chunk)


def format_hexdump(image: bytes) -> str:
    lines: List[str] = []
    for row, idx in enumerate(range(0, len(image), ROW_SIZE)):
        lo = image[idx:idx + HALF_ROW]
        hi = image[idx + HALF_ROW:idx + ROW_SIZE]
        lines.append(
            f"${idx:04x} - ${idx + ROW_SIZE - 1:04x}:  {_hex(lo)}  {_hex(hi)}  {_ascii(lo)} {_ascii(hi)}"
        )
        if row % ROWS_PER_BLOCK == ROWS_PER_BLOCK - 1:
            lines.append("")
    return "\n".join(lines)


def write_dump(image: bytes, path: Path, *, binary: bool = False) -> Path:
    path = Path(path)
    if binary:
        path.write_bytes(image)
    else:
        path.write_text(format_hexdump(image), encoding="utf-8")
    return path


def read_source(path: Path) -> bytes:
    """Read a binary load source, rejecting files the EEPROM can't hold."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InvalidArgument(
            f"Could not read source file {path}.",
            hint=str(e),
            details={"path": str(path)},
        ) from None

    if len(data) > MAX_LOAD_SIZE:
        raise InvalidArgument(
            f"Source file {path} is {len(data)} bytes; the EEPROM holds {MAX_LOAD_SIZE}.",
            details={"path": str(path), "size": len(data)},
        )
    return data
