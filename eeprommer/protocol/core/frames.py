# eeprommer/protocol/core/frames.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .defs import MAX_FRAME_PAYLOAD


class ExpectKind(str, Enum):
    """Frame kind an exchange is waiting for."""

    DATA = "data"
    ACK = "ack"


@dataclass(frozen=True)
class AckFrame:
    """Zero-length frame: command completed, nothing to return."""

    kind = ExpectKind.ACK

    def encode(self) -> bytes:
        return b"\x00"


@dataclass(frozen=True)
class DataFrame:
    """Non-empty frame; payload goes back to the caller verbatim."""

    payload: bytes

    kind = ExpectKind.DATA

    def __post_init__(self) -> None:
        if not self.payload:
            raise ValueError("DataFrame payload must not be empty (use AckFrame)")
        if len(self.payload) > MAX_FRAME_PAYLOAD:
            raise ValueError(f"DataFrame payload too long: {len(self.payload)} > {MAX_FRAME_PAYLOAD}")
        object.__setattr__(self, "payload", bytes(self.payload))

    def encode(self) -> bytes:
        return bytes([len(self.payload)]) + self.payload


Frame = Union[AckFrame, DataFrame]
