from __future__ import annotations

import pytest

import eeprommer.transport.uart as uart_mod
from eeprommer.transport.errors import TransportIOError, TransportOpenError


class FakeSerial:
    def __init__(self, port, baudrate, timeout, write_timeout):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.write_timeout = write_timeout
        self.is_open = True

        self._rx = bytearray()
        self._write_ret = 0
        self._raise_on_read = None
        self._raise_on_in_waiting = None
        self._raise_on_write = None
        self._raise_on_flush = None

        self.read_sizes = []
        self.reset_in_called = 0
        self.reset_out_called = 0
        self.flush_called = 0
        self.close_called = 0

    @property
    def in_waiting(self) -> int:
        if self._raise_on_in_waiting is not None:
            raise self._raise_on_in_waiting
        return len(self._rx)

    def reset_input_buffer(self):
        self.reset_in_called += 1

    def reset_output_buffer(self):
        self.reset_out_called += 1

    def read(self, n: int) -> bytes:
        if self._raise_on_read is not None:
            raise self._raise_on_read
        self.read_sizes.append(n)
        out = bytes(self._rx[:n])
        del self._rx[:n]
        return out

    def write(self, data: bytes) -> int:
        if self._raise_on_write is not None:
            raise self._raise_on_write
        return self._write_ret

    def flush(self) -> None:
        self.flush_called += 1
        if self._raise_on_flush is not None:
            raise self._raise_on_flush

    def close(self) -> None:
        self.close_called += 1
        self.is_open = False


def _open_with(monkeypatch, s: FakeSerial) -> uart_mod.UARTTransport:
    monkeypatch.setattr(uart_mod.serial, "Serial", lambda *a, **k: s)
    t = uart_mod.UARTTransport("COM1")
    t.open()
    return t


def test_open_success_resets_buffers(monkeypatch):
    created = {}

    def fake_serial_ctor(port, baudrate, timeout, write_timeout):
        s = FakeSerial(port, baudrate, timeout, write_timeout)
        created["ser"] = s
        return s

    monkeypatch.setattr(uart_mod.serial, "Serial", fake_serial_ctor)

    t = uart_mod.UARTTransport("COM5", baudrate=9600, timeout=0.1)
    t.open()

    assert t.ser is created["ser"]
    assert t.is_open() is True
    assert created["ser"].baudrate == 9600
    assert created["ser"].reset_in_called == 1
    assert created["ser"].reset_out_called == 1


def test_open_serial_exception_raises_transport_open_error(monkeypatch):
    def fake_serial_ctor(*a, **k):
        raise uart_mod.SerialException("no port")

    monkeypatch.setattr(uart_mod.serial, "Serial", fake_serial_ctor)

    t = uart_mod.UARTTransport("COM404")
    with pytest.raises(TransportOpenError):
        t.open()

    assert t.ser is None
    assert t.is_open() is False


@pytest.mark.parametrize("op", ["read", "write", "flush"])
def test_io_when_not_open_raises(op):
    t = uart_mod.UARTTransport("COM1")
    with pytest.raises(TransportIOError):
        if op == "read":
            t.read(1)
        elif op == "write":
            t.write(b"\x00")
        else:
            t.flush()


def test_read_returns_first_byte_plus_what_is_buffered(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    s._rx += b"\x03\x72\x00\x0a"
    t = _open_with(monkeypatch, s)

    assert t.read(256) == b"\x03\x72\x00\x0a"
    # one blocking single-byte read, then only what was waiting
    assert s.read_sizes == [1, 3]


def test_read_caps_at_n(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    s._rx += bytes(10)
    t = _open_with(monkeypatch, s)

    assert len(t.read(4)) == 4
    assert s.in_waiting == 6


def test_read_timeout_returns_empty(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    t = _open_with(monkeypatch, s)

    assert t.read(256) == b""
    assert s.read_sizes == [1]


def test_read_serial_exception_clears_ser_and_raises(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    s._raise_on_read = uart_mod.SerialException("read fail")
    t = _open_with(monkeypatch, s)

    with pytest.raises(TransportIOError):
        t.read(1)

    assert t.ser is None


def test_read_os_error_from_in_waiting_clears_ser_and_raises(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    s._rx += b"\x01\x42"
    # termios ioctl on an unplugged device
    s._raise_on_in_waiting = OSError(5, "Input/output error")
    t = _open_with(monkeypatch, s)

    with pytest.raises(TransportIOError) as ei:
        t.read(256)

    assert ei.value.op == "read"
    assert t.ser is None


def test_write_returns_bytes_written(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    s._write_ret = 4
    t = _open_with(monkeypatch, s)

    assert t.write(b"abcd") == 4


def test_write_serial_exception_clears_ser_and_raises(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    s._raise_on_write = uart_mod.SerialException("write fail")
    t = _open_with(monkeypatch, s)

    with pytest.raises(TransportIOError):
        t.write(b"x")

    assert t.ser is None


def test_flush_calls_underlying_flush(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    t = _open_with(monkeypatch, s)

    t.flush()
    assert s.flush_called == 1


def test_flush_serial_exception_clears_ser_and_raises(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    s._raise_on_flush = uart_mod.SerialException("flush fail")
    t = _open_with(monkeypatch, s)

    with pytest.raises(TransportIOError):
        t.flush()

    assert t.ser is None


def test_close_is_idempotent(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    t = _open_with(monkeypatch, s)

    t.close()
    t.close()

    assert s.close_called == 1
    assert t.ser is None


def test_context_manager_opens_and_closes(monkeypatch):
    s = FakeSerial("COM1", 9600, 0.05, 2.0)
    monkeypatch.setattr(uart_mod.serial, "Serial", lambda *a, **k: s)

    with uart_mod.UARTTransport("COM1") as t:
        assert t.is_open()
    assert s.close_called == 1
