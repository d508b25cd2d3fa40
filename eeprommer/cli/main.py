# eeprommer/cli/main.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from eeprommer.app.config import ConfigStore
from eeprommer.core.errors import EeprommerError

from eeprommer.cli.args import config_path_from_argv, parse_args
from eeprommer.cli.logging_setup import configure_console_logging, configure_file_logging
from eeprommer.cli.progress import TerminalGuard
from eeprommer.cli.commands import (
    cmd_dump,
    cmd_get,
    cmd_list,
    cmd_load,
    cmd_read,
    cmd_reset,
    cmd_set,
    cmd_write,
)

DEVICE_COMMANDS = {
    "dump": cmd_dump,
    "load": cmd_load,
    "read": cmd_read,
    "write": cmd_write,
    "reset": cmd_reset,
}


def main(argv: Optional[list[str]] = None) -> int:
    TerminalGuard().install()
    try:
        config_path = config_path_from_argv(argv)
        store = ConfigStore(Path(config_path) if config_path else None)
        cfg = store.load()

        args = parse_args(argv, cfg)
        configure_console_logging(args.verbose)
        if args.log_file:
            configure_file_logging(Path(args.log_file).expanduser())

        if args.cmd == "list":
            return cmd_list(args)
        if args.cmd == "get":
            return cmd_get(args, store)
        if args.cmd == "set":
            return cmd_set(args, store)

        handler = DEVICE_COMMANDS.get(args.cmd)
        if handler is None:
            return 2
        return handler(args, cfg)
    except EeprommerError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
