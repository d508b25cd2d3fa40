# eeprommer/core/errors.py
from __future__ import annotations


class EeprommerError(Exception):
    """
    Base class for all expected operational errors in eeprommer.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, logs, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Input / configuration errors (no hardware access yet)
# ---------------------------------------------------------------------------

class InvalidArgument(EeprommerError):
    """
    Caller input rejected before talking to the device.

    Examples:
      - address outside 0..32767
      - byte value outside 0..255
      - unparsable number, unreadable or oversized source file
    """
    code = "invalid_argument"


class ConfigError(EeprommerError):
    """
    Configuration key or value is invalid.
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Transport / connection lifecycle errors
# ---------------------------------------------------------------------------

class DeviceConnectError(EeprommerError):
    """
    Serial port could not be opened, or the programmer never greeted us.

    Examples:
      - COM port not found
      - permission denied
      - device already in use
      - no handshake ACK after open
    """
    code = "device_connect_error"


class DeviceDisconnectedError(EeprommerError):
    """
    Device was connected but the serial link failed mid-session.
    """
    code = "device_disconnected"


# ---------------------------------------------------------------------------
# Protocol / device errors
# ---------------------------------------------------------------------------

class ProtocolCommunicationError(EeprommerError):
    """
    Protocol-level failure.

    Examples:
      - ACK where data was expected (or the reverse)
      - exchange timeout
      - payload too large for the device
    """
    code = "protocol_communication_error"


class VerificationMismatch(EeprommerError):
    """
    A written byte did not read back as written.
    """
    code = "verification_mismatch"

    def __init__(self, *, address: int, expected: int, actual: int):
        super().__init__(
            "Write failed: actual value doesn't match expected.",
            hint=f"Expected: 0x{expected:02x}\tActual: 0x{actual:02x}",
            details={"address": address, "expected": expected, "actual": actual},
        )
        self.address = address
        self.expected = expected
        self.actual = actual
