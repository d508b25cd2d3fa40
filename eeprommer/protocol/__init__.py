# protocol/__init__.py

# Core classes
from .core import AckFrame, DataFrame, ExpectKind, Frame, FrameParser, messages
from .engine import ExchangeEngine
from .eeprom_client import EepromClient

__all__ = [
    "AckFrame", "DataFrame", "ExpectKind", "Frame", "FrameParser", "messages",
    "ExchangeEngine", "EepromClient",
]
