# transport/__init__.py

from .base import Transport
from .errors import TransportError, TransportIOError, TransportOpenError
from .uart import UARTTransport

__all__ = [
    "Transport",
    "TransportError", "TransportIOError", "TransportOpenError",
    "UARTTransport",
]
