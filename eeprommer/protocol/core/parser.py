# eeprommer/protocol/core/parser.py
from __future__ import annotations

import logging
from typing import Optional

from .frames import AckFrame, DataFrame, Frame


class FrameParser:
    """
    Incremental decoder for length-prefixed frames.

    Wire format: [len:u8][payload:len bytes]. len == 0 is an acknowledgment,
    anything else is a data frame. Bytes are buffered until a whole frame is
    available, so a frame may arrive across any number of reads.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.buffer = bytearray()
        self._log = logger or logging.getLogger(__name__)

    # ---------------- Public API ----------------
    def feed(self, data: bytes) -> None:
        """Feed raw bytes into the parser buffer."""
        self.buffer.extend(data)
        self._log.debug("Parser fed %d bytes, buffer_len=%d", len(data), len(self.buffer))

    def get_frame(self) -> Optional[Frame]:
        """Parse and return the next complete frame, if available."""
        if not self.buffer:
            return None

        payload_len = self.buffer[0]
        total_len = 1 + payload_len
        if len(self.buffer) < total_len:
            return None  # Wait for more bytes

        payload = bytes(self.buffer[1:total_len])
        del self.buffer[:total_len]

        if payload_len == 0:
            self._log.debug("Parsed ACK frame")
            return AckFrame()

        self._log.debug("Parsed DATA frame payload_len=%d", payload_len)
        return DataFrame(payload)

    def flush(self) -> Optional[DataFrame]:
        """
        End of stream: hand back whatever is left as a final data frame.

        A leftover can only be an incomplete data frame (a lone zero byte
        would already have been parsed as an ack), so nothing is returned
        as an ack here.
        """
        if not self.buffer:
            return None
        rest = bytes(self.buffer)
        self.buffer.clear()
        self._log.warning("Parser flushed %d trailing bytes", len(rest))
        return DataFrame(rest)

    def reset(self) -> None:
        self.buffer.clear()
