# eeprommer/cli/progress.py
from __future__ import annotations

import atexit
import signal
import sys
from typing import Optional, TextIO

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


class TerminalGuard:
    """
    Restores the terminal cursor when the process exits, however it exits.

    install() is idempotent; the progress bar marks the cursor hidden and
    the guard only writes the restore sequence if that is still the case.
    """

    _installed = False
    cursor_hidden = False

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stderr

    def install(self) -> "TerminalGuard":
        cls = type(self)
        if cls._installed:
            return self
        cls._installed = True

        atexit.register(self.restore)
        for signame in ("SIGINT", "SIGTERM"):
            sig = getattr(signal, signame, None)
            if sig is None:
                continue
            prev = signal.getsignal(sig)
            signal.signal(sig, self._make_handler(prev))
        return self

    def _make_handler(self, prev):
        def _handler(signum, frame):
            self.restore()
            if callable(prev):
                prev(signum, frame)
            else:
                raise SystemExit(128 + signum)
        return _handler

    def hide(self) -> None:
        if self.stream.isatty():
            self.stream.write(HIDE_CURSOR)
            self.stream.flush()
            type(self).cursor_hidden = True

    def restore(self) -> None:
        if type(self).cursor_hidden:
            type(self).cursor_hidden = False
            try:
                self.stream.write(SHOW_CURSOR)
                self.stream.flush()
            except (OSError, ValueError):
                # stream already closed at interpreter shutdown
                pass


class ProgressBar:
    """
    Single-line byte progress bar:

        [################------------------------]  40% | 13107/32768 bytes
    """

    def __init__(self, total: int, *, width: int = 40, stream: Optional[TextIO] = None):
        self.total = int(total)
        self.width = int(width)
        self.stream = stream or sys.stderr
        self._guard = TerminalGuard(self.stream)
        self._last: Optional[str] = None
        self._open = False

    def start(self) -> "ProgressBar":
        self._guard.hide()
        self._open = True
        self.update(0.0)
        return self

    def update(self, fraction: float) -> None:
        fraction = min(max(float(fraction), 0.0), 1.0)
        filled = int(round(fraction * self.width))
        value = int(round(fraction * self.total))
        line = (
            f" [{'#' * filled}{'-' * (self.width - filled)}] "
            f"{int(fraction * 100):3d}% | {value}/{self.total} bytes"
        )
        if line == self._last:
            return
        self._last = line
        self.stream.write("\r" + line)
        self.stream.flush()

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        self.stream.write("\n")
        self.stream.flush()
        self._guard.restore()

    def __call__(self, fraction: float) -> None:
        self.update(fraction)

    def __enter__(self) -> "ProgressBar":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
