# eeprommer/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional

from eeprommer.app.config import EeprommerConfig


def build_parser(cfg: EeprommerConfig) -> argparse.ArgumentParser:
    """
    Build the CLI parser. Stored config supplies the --port/--baud defaults.
    """
    parser = argparse.ArgumentParser(prog="eeprommer", description="EEPROM programmer command line.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v INFO, -vv DEBUG).")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")
    parser.add_argument("--config", default=None, help="Config file path (default: user config dir).")

    sub = parser.add_subparsers(dest="cmd", required=True)

    device = argparse.ArgumentParser(add_help=False)
    device.add_argument("-p", "--port", default=cfg.port, help=f"Programmer serial port (default: {cfg.port}).")
    device.add_argument("--baud", type=int, default=cfg.baud_rate, help=f"Baud rate (default: {cfg.baud_rate}).")
    device.add_argument(
        "--no-handshake",
        dest="handshake",
        action="store_false",
        default=cfg.handshake,
        help="Don't wait for the programmer's greeting ACK after opening the port.",
    )

    p_dump = sub.add_parser("dump", aliases=["d"], parents=[device], help="Dump the EEPROM contents to a file.")
    p_dump.add_argument("target_file", help="Name of target file for dump contents.")
    p_dump.add_argument("--binary", action="store_true", help="Write raw bytes instead of a hex listing.")

    p_load = sub.add_parser("load", aliases=["ld"], parents=[device], help="Load a binary file into the EEPROM.")
    p_load.add_argument("source_file", help="Name of binary source file.")
    p_load.add_argument("-V", "--validate", action="store_true", help="Validate EEPROM contents after loading.")

    p_read = sub.add_parser("read", aliases=["r"], parents=[device], help="Read a byte from the EEPROM.")
    p_read.add_argument("address", help="15-bit address, in decimal or hex; e.g. '31250' or '0x7a12'.")

    p_write = sub.add_parser("write", aliases=["w"], parents=[device], help="Write a byte to the EEPROM.")
    p_write.add_argument("address", help="15-bit address, in decimal or hex; e.g. '17925' or '0x0c21'.")
    p_write.add_argument("byte", help="Single byte, in decimal or hex; e.g. '83' or '0xff'.")

    sub.add_parser("reset", parents=[device], help="Send the reset command.")

    sub.add_parser("list", aliases=["ls"], help="List available serial ports.")

    p_get = sub.add_parser("get", help="Print a value from the CLI config.")
    p_get.add_argument("key")

    p_set = sub.add_parser("set", help="Set a value in the CLI config.")
    p_set.add_argument("key")
    p_set.add_argument("value")

    return parser


ALIASES = {"d": "dump", "ld": "load", "r": "read", "w": "write", "ls": "list"}


def config_path_from_argv(argv: Optional[list[str]]) -> Optional[str]:
    """
    Stage 1: pull --config out before the full parser is built, since the
    stored config supplies the full parser's defaults.
    """
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    known, _unknown = pre.parse_known_args(argv)
    return known.config


def parse_args(argv: Optional[list[str]], cfg: EeprommerConfig) -> argparse.Namespace:
    args = build_parser(cfg).parse_args(argv)
    args.cmd = ALIASES.get(args.cmd, args.cmd)
    return args
