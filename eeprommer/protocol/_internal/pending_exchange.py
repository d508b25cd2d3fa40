# eeprommer/protocol/_internal/pending_exchange.py
from __future__ import annotations

import time
from concurrent.futures import Future
from typing import Optional

from eeprommer.protocol.core.frames import ExpectKind, Frame


class PendingExchange:
    """Holds a Future for the single in-flight exchange."""

    def __init__(self, command: bytes, expect: ExpectKind, timeout_s: Optional[float]):
        self.command = bytes(command)
        self.expect = ExpectKind(expect)
        self.timeout_s = None if timeout_s is None else float(timeout_s)
        self.created_at = time.perf_counter()
        self.future: Future = Future()

    def done(self) -> bool:
        return self.future.done()

    def expired(self, now: float) -> bool:
        return self.timeout_s is not None and (now - self.created_at) > self.timeout_s

    def set_result(self, frame: Optional[Frame], status: str, reason: str = "") -> None:
        """
        Settle the exchange.

        status is "frame" when a frame arrived (classified against the
        expectation here), otherwise one of "timeout", "send_failed",
        "link_lost". Only the first call has any effect.
        """
        if self.future.done():
            return

        if status != "frame":
            result = {"status": status}
            if reason:
                result["reason"] = reason
            self.future.set_result(result)
            return

        if frame is None:
            self.future.set_result({"status": "unknown"})
            return

        payload = getattr(frame, "payload", b"")
        if frame.kind == self.expect:
            self.future.set_result({"status": "ok", "payload": payload})
        elif frame.kind == ExpectKind.ACK:
            self.future.set_result({"status": "unexpected_ack"})
        else:
            self.future.set_result({"status": "unexpected_data", "payload": payload})

    def wait(self, timeout: Optional[float] = None) -> dict:
        """Blocking wait for the exchange to settle."""
        try:
            return self.future.result(timeout=timeout)
        except Exception:
            return {"status": "pending"}
