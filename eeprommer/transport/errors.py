# eeprommer/transport/errors.py
from __future__ import annotations


class TransportError(Exception):
    """Serial link failure below the protocol layer."""


class TransportOpenError(TransportError):
    """The port could not be opened (missing, busy, no permission)."""

    def __init__(self, port: str, reason: str):
        super().__init__(f"could not open {port}: {reason}")
        self.port = port
        self.reason = reason


class TransportIOError(TransportError):
    """read/write/flush failed, or was attempted on a port that isn't open."""

    def __init__(self, op: str, reason: str):
        super().__init__(f"serial {op} failed: {reason}")
        self.op = op
        self.reason = reason
