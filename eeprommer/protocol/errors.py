# eeprommer/protocol/errors.py


class ProtocolError(Exception):
    """Base for protocol-level failures (framing/exchange semantics)."""


class UnexpectedAck(ProtocolError):
    def __init__(self, command: bytes):
        super().__init__(f"unexpected serial ACK in reply to {command.hex()}")
        self.command = command


class UnexpectedData(ProtocolError):
    def __init__(self, command: bytes, payload: bytes):
        super().__init__(f"unexpected serial data {payload.hex()} in reply to {command.hex()}")
        self.command = command
        self.payload = payload


class ExchangeTimeout(ProtocolError):
    def __init__(self, command: bytes, timeout_s: float):
        super().__init__(f"no reply to {command.hex()} after {timeout_s}s")
        self.command = command
        self.timeout_s = timeout_s


class ExchangeBusy(ProtocolError):
    """A second exchange was issued while another was still pending."""


class SendFailed(ProtocolError):
    def __init__(self, command: bytes, reason: str = "send_failed"):
        super().__init__(f"send of {command.hex()} failed ({reason})")
        self.command = command
        self.reason = reason


class LinkLost(ProtocolError):
    def __init__(self, reason: str):
        super().__init__(f"link lost while waiting for a reply ({reason})")
        self.reason = reason


class PayloadTooLarge(ProtocolError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"load payload is {size} bytes, limit is {limit}")
        self.size = size
        self.limit = limit
