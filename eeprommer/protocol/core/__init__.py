# protocol/core/__init__.py

from . import messages
from .defs import Opcode, CHUNK_SIZE, DUMP_SIZE, MAX_LOAD_SIZE
from .frames import AckFrame, DataFrame, ExpectKind, Frame
from .parser import FrameParser

__all__ = [
    "messages",
    "Opcode", "CHUNK_SIZE", "DUMP_SIZE", "MAX_LOAD_SIZE",
    "AckFrame", "DataFrame", "ExpectKind", "Frame",
    "FrameParser",
]
