# eeprommer/transport/uart.py
from __future__ import annotations

from typing import Optional

import serial
from serial import SerialException

from .base import Transport
from .errors import TransportIOError, TransportOpenError


class UARTTransport(Transport):
    """
    Programmer serial port via pyserial.

    read(n) blocks for at most `timeout` waiting for the first byte, then
    returns it together with whatever else is already buffered (up to n).
    Any SerialException, or OSError from the termios calls pyserial makes
    underneath (unplugged device), drops the handle; the port must be reopened.
    """

    def __init__(self, port: str, baudrate: int = 9600, timeout: float = 0.05, write_timeout: float = 2.0):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.write_timeout = write_timeout
        self.ser: Optional[serial.Serial] = None

    def open(self) -> None:
        try:
            self.ser = serial.Serial(
                self.port,
                baudrate=self.baudrate,
                timeout=self.timeout,
                write_timeout=self.write_timeout,
            )
            # drop anything left over from a previous session
            self.ser.reset_input_buffer()
            self.ser.reset_output_buffer()
        except SerialException as e:
            self.ser = None
            raise TransportOpenError(self.port, str(e)) from None

    def close(self) -> None:
        ser, self.ser = self.ser, None
        if ser is not None:
            ser.close()

    def is_open(self) -> bool:
        return self.ser is not None and self.ser.is_open

    def _port(self, op: str) -> serial.Serial:
        if self.ser is None:
            raise TransportIOError(op, "port not open")
        return self.ser

    def _lost(self, op: str, e: OSError) -> TransportIOError:
        self.ser = None
        return TransportIOError(op, str(e))

    def read(self, n: int) -> bytes:
        ser = self._port("read")
        try:
            buf = ser.read(1)
            if not buf or n <= 1:
                return buf
            waiting = ser.in_waiting
            if waiting:
                buf += ser.read(min(n - 1, waiting))
            return buf
        except (SerialException, OSError) as e:
            raise self._lost("read", e) from None

    def write(self, data: bytes) -> int:
        ser = self._port("write")
        try:
            return ser.write(data)
        except (SerialException, OSError) as e:
            raise self._lost("write", e) from None

    def flush(self) -> None:
        ser = self._port("flush")
        try:
            ser.flush()
        except (SerialException, OSError) as e:
            raise self._lost("flush", e) from None
