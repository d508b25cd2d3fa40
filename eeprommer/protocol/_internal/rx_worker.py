# eeprommer/protocol/_internal/rx_worker.py
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional


class RxWorker(threading.Thread):
    """
    Calls `pump` in a loop until stopped.

    `pump` does one bounded read and settles whatever it completed. An
    exception from it is logged (with `describe()` for context) and the
    loop carries on after a short back-off; `errors` counts them.
    """

    IDLE_WAIT_S = 0.001
    ERROR_WAIT_S = 0.01

    def __init__(
        self,
        pump: Callable[[], None],
        *,
        logger: Optional[logging.Logger] = None,
        describe: Callable[[], object] = lambda: None,
    ):
        super().__init__(daemon=True, name="eeprommer-rx")
        self._pump = pump
        self._log = logger or logging.getLogger(__name__)
        self._describe = describe
        self._stop_event = threading.Event()
        self.errors = 0

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._pump()
            except Exception:
                self.errors += 1
                self._log.exception("RX_WORKER_EXCEPTION pending=%s", self._describe())
                self._stop_event.wait(self.ERROR_WAIT_S)
            else:
                self._stop_event.wait(self.IDLE_WAIT_S)

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()
