# eeprommer/cli/logging_setup.py
from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_console_logging(verbosity: int) -> None:
    """
    -v → INFO, -vv → DEBUG on stderr. Without -v only warnings go to the
    file handler (if any) and the console stays clean for the progress bar.
    """
    root = logging.getLogger()
    if verbosity <= 0:
        root.setLevel(logging.WARNING)
        return

    level = logging.INFO if verbosity == 1 else logging.DEBUG
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(level)
            break
    else:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(level)
        sh.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(sh)

    if root.level == logging.NOTSET or root.level > level:
        root.setLevel(level)


def configure_file_logging(app_log_path: Path, level: int = logging.INFO) -> None:
    """
    Add a file handler to the root logger (idempotent).
    """
    root = logging.getLogger()
    app_log_path = Path(app_log_path)
    app_log_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(app_log_path.resolve())

    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(app_log_path, encoding="utf-8", delay=True)
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    if root.level == logging.NOTSET or root.level > level:
        root.setLevel(level)
