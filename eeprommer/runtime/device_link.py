# eeprommer/runtime/device_link.py
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Optional

from eeprommer.protocol.eeprom_client import EepromClient, ProgressCallback
from eeprommer.protocol.engine import ExchangeEngine
from eeprommer.protocol.errors import (
    ExchangeTimeout,
    LinkLost,
    PayloadTooLarge,
    ProtocolError,
    SendFailed,
)
from eeprommer.transport.base import Transport as HwTransport
from eeprommer.transport.errors import TransportError, TransportOpenError

from eeprommer.core.errors import (
    DeviceConnectError,
    DeviceDisconnectedError,
    InvalidArgument,
    ProtocolCommunicationError,
)


def _translate_errors(fn):
    """Map protocol/transport failures of a device call to operator-safe errors."""

    @functools.wraps(fn)
    def wrapper(self: "DeviceLink", *args, **kwargs):
        op = fn.__name__
        try:
            return fn(self, *args, **kwargs)
        except PayloadTooLarge as e:
            raise InvalidArgument(
                "Source data does not fit in the EEPROM.",
                hint=str(e),
                details={"size": e.size, "limit": e.limit},
            ) from None
        except (SendFailed, LinkLost, TransportError) as e:
            self._log.error("DEVICE_LINK_LOST op=%s err=%s", op, e)
            raise DeviceDisconnectedError(
                f"Serial link failed during {op}.",
                hint=str(e),
                details={"op": op},
            ) from None
        except ExchangeTimeout as e:
            self._log.error("DEVICE_TIMEOUT op=%s err=%s", op, e)
            raise ProtocolCommunicationError(
                f"Programmer stopped responding during {op}.",
                hint="Check the cable and baud rate, or raise exchange_timeout_s.",
                details={"op": op, "timeout_s": e.timeout_s},
            ) from None
        except ProtocolError as e:
            self._log.error("DEVICE_PROTOCOL_ERROR op=%s err=%s", op, e)
            raise ProtocolCommunicationError(
                f"Protocol error during {op}.",
                hint=str(e),
                details={"op": op},
            ) from None

    return wrapper


@dataclass
class DeviceLink:
    """
    Transfer session: owns the serial transport and the exchange engine for
    one CLI invocation.

    Responsibilities:
      - open/close the underlying transport (close happens exactly once)
      - wait for the programmer's greeting ACK when `handshake` is set
      - expose the read/write/dump/load API
      - translate low-level failures into operator-safe errors
    """

    transport: HwTransport
    exchange_timeout_s: Optional[float] = 2.0
    handshake: bool = True
    handshake_timeout_s: Optional[float] = 3.0
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        self._log = self.logger or logging.getLogger(__name__)
        self._engine: Optional[ExchangeEngine] = None
        self._client: Optional[EepromClient] = None
        self._closed = False

    @property
    def is_connected(self) -> bool:
        return self._engine is not None and self._client is not None

    @property
    def client(self) -> EepromClient:
        if self._client is None:
            raise RuntimeError("DeviceLink not connected (client is None)")
        return self._client

    def connect(self) -> None:
        if self.is_connected:
            return
        if self._closed:
            raise RuntimeError("DeviceLink already closed")

        port = getattr(self.transport, "port", "?")

        # Open transport
        try:
            self.transport.open()
        except TransportOpenError as e:
            self._log.error("TRANSPORT_OPEN_FAILED port=%s err=%s", port, e)
            raise DeviceConnectError(
                f"Could not open serial port {port}.",
                hint=str(e),
                details={"port": port},
            ) from None
        except TransportError as e:
            self._log.error("TRANSPORT_OPEN_ERROR port=%s err=%s", port, e)
            raise DeviceConnectError(
                "Transport error while opening device.",
                hint=str(e),
                details={"port": port},
            ) from None

        self._log.info("TRANSPORT_OPEN port=%s", port)

        # RX thread starts lazily, after the first exchange slot is armed.
        self._engine = ExchangeEngine(
            self.transport,
            exchange_timeout_s=self.exchange_timeout_s,
            logger=self._log,
        )
        self._client = EepromClient(self._engine, logger=self._log)

        if self.handshake:
            try:
                self._engine.wait_for_ack(self.handshake_timeout_s)
            except ProtocolError as e:
                self._log.error("HANDSHAKE_FAILED port=%s err=%s", port, e)
                self.disconnect()
                raise DeviceConnectError(
                    f"Programmer on {port} did not greet with an ACK.",
                    hint="Check the port and that the programmer firmware is running.",
                    details={"port": port, "error": str(e)},
                ) from None
            self._log.info("HANDSHAKE_OK port=%s", port)

    def disconnect(self) -> None:
        if self._closed:
            return
        self._closed = True

        if self._engine is not None:
            try:
                self._engine.stop_rx_thread()
            except Exception:
                self._log.exception("Failed to stop RX thread")
            self._engine = None

        self._client = None

        try:
            self.transport.close()
        except Exception:
            self._log.exception("Failed to close transport")
        else:
            self._log.info("TRANSPORT_CLOSED")

    # ---------------- device API ----------------
    @_translate_errors
    def read(self, address: int) -> int:
        return self.client.read(address)

    @_translate_errors
    def write(self, address: int, value: int) -> bool:
        return self.client.write(address, value)

    @_translate_errors
    def write_checked(self, address: int, value: int) -> None:
        self.client.write_checked(address, value)

    @_translate_errors
    def reset(self) -> None:
        self.client.reset()

    @_translate_errors
    def dump(self, progress: Optional[ProgressCallback] = None) -> bytes:
        return self.client.dump(progress=progress)

    @_translate_errors
    def load(self, data: bytes, progress: Optional[ProgressCallback] = None) -> None:
        self.client.load(data, progress=progress)

    @_translate_errors
    def validate(self, data: bytes, progress: Optional[ProgressCallback] = None) -> bool:
        return self.client.validate(data, progress=progress)

    def __enter__(self) -> "DeviceLink":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()
