# eeprommer/protocol/engine.py
from __future__ import annotations

import logging
import threading
import time
from typing import Optional, Protocol as TypingProtocol

from eeprommer.transport.errors import TransportError

from .core import ExpectKind, FrameParser
from .errors import (
    ExchangeBusy,
    ExchangeTimeout,
    LinkLost,
    ProtocolError,
    SendFailed,
    UnexpectedAck,
    UnexpectedData,
)
from ._internal.pending_exchange import PendingExchange
from ._internal.rx_worker import RxWorker


class TransportIO(TypingProtocol):
    """Minimal I/O interface for ExchangeEngine."""
    def write(self, data: bytes) -> int: ...
    def read(self, size: int) -> bytes: ...
    def flush(self) -> None: ...


class ExchangeEngine:
    """
    Exchange coordinator.

    Sends one command at a time and settles it with the next frame the
    device sends back. Exactly one exchange may be pending; the RX worker
    thread feeds incoming bytes to the frame parser and hands each frame
    to that exchange.
    """

    READ_SIZE = 256

    def __init__(
        self,
        transport: TransportIO,
        *,
        exchange_timeout_s: Optional[float] = 2.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.transport = transport
        self.exchange_timeout_s = None if exchange_timeout_s is None else float(exchange_timeout_s)

        self._log = logger or logging.getLogger(__name__)
        self._parser = FrameParser(logger=self._log)

        self._rx_thread: Optional[RxWorker] = None

        self._lock = threading.Lock()
        self._pending: Optional[PendingExchange] = None
        # Set once a read fails; the RX worker is gone and nothing else will settle.
        self._link_lost: Optional[str] = None

    @property
    def pending_command(self) -> Optional[str]:
        pending = self._pending
        return pending.command.hex() if pending is not None else None

    # ---------------- Exchange API ----------------
    def send_async(self, command: bytes, expect: ExpectKind) -> PendingExchange:
        """Arm the exchange slot, then write `command`."""
        pending = PendingExchange(command, expect, self.exchange_timeout_s)

        with self._lock:
            if self._link_lost is not None:
                pending.set_result(None, "link_lost", reason=self._link_lost)
                return pending
            if self._pending is not None and not self._pending.done():
                raise ExchangeBusy(
                    f"exchange {self._pending.command.hex()} still pending, cannot send {bytes(command).hex()}"
                )
            self._pending = pending

        # Started only once a live exchange is armed; never after link loss.
        if self._rx_thread is None or not self._rx_thread.is_alive():
            self.start_rx_thread()

        self._log.debug("EXCHANGE_SEND expect=%s len=%d raw=%s", expect.value, len(command), bytes(command).hex())

        try:
            self._write(command)
        except Exception as e:
            # Disarm before reporting so a late frame can't settle a future exchange.
            with self._lock:
                if self._pending is pending:
                    self._pending = None
            pending.set_result(None, "send_failed", reason=str(e))
            self._log.exception("EXCHANGE_SEND_FAILED raw=%s", bytes(command).hex())

        return pending

    def send_expect_data(self, command: bytes) -> bytes:
        """Send `command` and return the payload of the data frame it answers with."""
        pending = self.send_async(command, ExpectKind.DATA)
        resp = self._require_ok(pending.wait(), pending)
        return resp["payload"]

    def send_expect_ack(self, command: bytes) -> None:
        """Send `command` and require an acknowledgment frame in reply."""
        pending = self.send_async(command, ExpectKind.ACK)
        self._require_ok(pending.wait(), pending)

    def send_without_response(self, command: bytes) -> None:
        """Fire-and-forget write; returns once the bytes are flushed."""
        with self._lock:
            if self._link_lost is not None:
                raise LinkLost(self._link_lost)
            if self._pending is not None and not self._pending.done():
                raise ExchangeBusy(
                    f"exchange {self._pending.command.hex()} still pending, cannot send {bytes(command).hex()}"
                )

        self._log.debug("EXCHANGE_SEND_BLIND len=%d raw=%s", len(command), bytes(command).hex())
        try:
            self._write(command)
        except Exception as e:
            self._log.exception("EXCHANGE_SEND_FAILED raw=%s", bytes(command).hex())
            raise SendFailed(bytes(command), str(e)) from None

    def wait_for_ack(self, timeout_s: Optional[float]) -> None:
        """
        Wait for an unsolicited acknowledgment (the device greets with one
        after it boots) without sending anything. `timeout_s=None` waits
        forever.

        The slot is armed before the RX thread starts so the greeting can't
        be dropped as unsolicited.
        """
        pending = PendingExchange(b"", ExpectKind.ACK, timeout_s)
        with self._lock:
            if self._link_lost is not None:
                raise LinkLost(self._link_lost)
            if self._pending is not None and not self._pending.done():
                raise ExchangeBusy("cannot wait for handshake while an exchange is pending")
            self._pending = pending

        if self._rx_thread is None or not self._rx_thread.is_alive():
            self.start_rx_thread()

        self._require_ok(pending.wait(), pending)

    def _write(self, data: bytes) -> None:
        self.transport.write(bytes(data))
        self.transport.flush()

    @staticmethod
    def _require_ok(resp: dict, pending: PendingExchange) -> dict:
        status = resp.get("status")
        if status == "ok":
            return resp
        if status == "unexpected_ack":
            raise UnexpectedAck(pending.command)
        if status == "unexpected_data":
            raise UnexpectedData(pending.command, resp.get("payload", b""))
        if status == "timeout":
            raise ExchangeTimeout(pending.command, pending.timeout_s or 0.0)
        if status == "send_failed":
            raise SendFailed(pending.command, resp.get("reason", "send_failed"))
        if status == "link_lost":
            raise LinkLost(resp.get("reason", "read failed"))
        raise ProtocolError(f"exchange {pending.command.hex()} ended with status {status!r}")

    # ---------------- RX Thread ----------------
    def start_rx_thread(self) -> None:
        if self._rx_thread is None or not self._rx_thread.is_alive():
            self._rx_thread = RxWorker(self._pump_rx, logger=self._log, describe=lambda: self.pending_command)
            self._rx_thread.start()
            self._log.info("RX_THREAD_STARTED")

    def stop_rx_thread(self) -> None:
        if self._rx_thread:
            self._rx_thread.stop()
            if self._rx_thread is not threading.current_thread():
                self._rx_thread.join()
            self._log.info("RX_THREAD_STOPPED")

        # Nobody will answer anymore.
        self._settle_pending(None, "link_lost", reason="engine stopped")

    # ---------------- RX Pump ----------------
    def _pump_rx(self) -> None:
        try:
            data = self.transport.read(self.READ_SIZE)
        except TransportError as e:
            self._log.error("RX_READ_FAILED err=%s", e)
            with self._lock:
                self._link_lost = str(e)
            self._settle_pending(None, "link_lost", reason=str(e))
            if self._rx_thread is not None:
                self._rx_thread.stop()
            return

        if data:
            self._parser.feed(data)

        while True:
            frame = self._parser.get_frame()
            if frame is None:
                break

            if not self._settle_pending(frame, "frame"):
                self._log.warning("RX_UNSOLICITED_FRAME kind=%s payload=%s",
                                  frame.kind.value, getattr(frame, "payload", b"").hex())

        # Expire a stale exchange
        now = time.perf_counter()
        with self._lock:
            pending = self._pending
            expired = pending is not None and pending.expired(now)
            if expired:
                self._pending = None

        if expired:
            self._log.warning("EXCHANGE_TIMEOUT raw=%s timeout_s=%s", pending.command.hex(), pending.timeout_s)
            # A half-received reply would misalign every later frame.
            if self._parser.buffer:
                self._log.warning("RX_PARTIAL_DISCARDED len=%d", len(self._parser.buffer))
                self._parser.reset()
            pending.set_result(None, "timeout")

    def _settle_pending(self, frame, status: str, reason: str = "") -> bool:
        """Consume the pending slot (if any) with `frame`/`status`."""
        with self._lock:
            pending = self._pending
            self._pending = None

        if pending is None or pending.done():
            return False

        pending.set_result(frame, status, reason=reason)
        return True

    # ---------------- Factory ----------------
    @classmethod
    def create(
        cls,
        transport: TransportIO,
        *,
        exchange_timeout_s: Optional[float] = 2.0,
        logger: Optional[logging.Logger] = None,
    ) -> "ExchangeEngine":
        engine = cls(transport, exchange_timeout_s=exchange_timeout_s, logger=logger)
        engine.start_rx_thread()
        return engine
