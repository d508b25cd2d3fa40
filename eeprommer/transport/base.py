# eeprommer/transport/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """
    Byte pipe between host and programmer.

    The exchange engine is the only reader and writer once a session is up:
      - read(n) may return anywhere from b"" (nothing arrived within the
        transport's timeout) to n bytes; frame boundaries are not preserved.
      - write(data) returns the number of bytes accepted; flush() blocks
        until they are on the wire.
      - close() is idempotent and safe after a failed read or write.
    Failures are reported as TransportError subclasses.
    """

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def is_open(self) -> bool: ...

    @abstractmethod
    def read(self, n: int) -> bytes: ...

    @abstractmethod
    def write(self, data: bytes) -> int: ...

    @abstractmethod
    def flush(self) -> None: ...

    def __enter__(self) -> "Transport":
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()
