# eeprommer/cli/commands.py
from __future__ import annotations

import logging
from pathlib import Path

from eeprommer.app.config import ConfigStore, EeprommerConfig
from eeprommer.app.dumpfile import read_source, write_dump
from eeprommer.app.validation import parse_address, parse_byte
from eeprommer.cli.progress import ProgressBar
from eeprommer.core.errors import VerificationMismatch
from eeprommer.protocol.core.defs import DUMP_SIZE
from eeprommer.runtime.device_link import DeviceLink
from eeprommer.transport.ports import list_candidates
from eeprommer.transport.uart import UARTTransport

log = logging.getLogger(__name__)


def open_link(args, cfg: EeprommerConfig) -> DeviceLink:
    """Build (not connect) the session for the port/baud chosen on the command line."""
    transport = UARTTransport(args.port, baudrate=args.baud, timeout=cfg.read_timeout_s)
    return DeviceLink(
        transport=transport,
        exchange_timeout_s=cfg.exchange_timeout_s,
        handshake=args.handshake,
        handshake_timeout_s=cfg.handshake_timeout_s,
    )


# ---------------- device commands ----------------

def cmd_read(args, cfg: EeprommerConfig) -> int:
    address = parse_address(args.address)
    with open_link(args, cfg) as link:
        print(f"Connected on port {args.port}")
        value = link.read(address)
    print(f"byte at address {args.address}: 0x{value:02x}")
    return 0


def cmd_write(args, cfg: EeprommerConfig) -> int:
    address = parse_address(args.address)
    value = parse_byte(args.byte)
    with open_link(args, cfg) as link:
        print(f"Connected on port {args.port}")
        try:
            link.write_checked(address, value)
        except VerificationMismatch as e:
            print(e.message)
            print(e.hint)
            return 1
    print(f"Wrote byte {args.byte} to address {args.address}")
    return 0


def cmd_reset(args, cfg: EeprommerConfig) -> int:
    with open_link(args, cfg) as link:
        print(f"Connected on port {args.port}")
        link.reset()
    print("Reset sent")
    return 0


def cmd_dump(args, cfg: EeprommerConfig) -> int:
    target = Path(args.target_file).resolve()
    with open_link(args, cfg) as link:
        print(f"Connected on port {args.port}")
        print("Dumping memory contents...")
        with ProgressBar(DUMP_SIZE) as bar:
            image = link.dump(progress=bar)

    print(f"Writing memory contents to file {target}")
    write_dump(image, target, binary=args.binary)
    print("done")
    return 0


def cmd_load(args, cfg: EeprommerConfig) -> int:
    source = read_source(Path(args.source_file).resolve())
    print(f"Read {len(source)} bytes from source file {args.source_file}")

    with open_link(args, cfg) as link:
        print(f"Connected on port {args.port}")
        print("\nLoading to EEPROM...")
        with ProgressBar(len(source)) as bar:
            link.load(source, progress=bar)

        if args.validate:
            print("\nValidating EEPROM contents...")
            with ProgressBar(DUMP_SIZE) as bar:
                ok = link.validate(source, progress=bar)
            if not ok:
                print("Validation failed, EEPROM contents differ from source")
                return 1
            print("Validation successful, EEPROM contents match source")

    print("done")
    return 0


# ---------------- host-only commands ----------------

def cmd_list(args) -> int:
    ports = list_candidates()
    if not ports:
        print("(no serial ports found)")
        return 0
    for p in ports:
        print(p.as_line())
    return 0


def cmd_get(args, store: ConfigStore) -> int:
    value = store.get(args.key)
    print(value)
    return 0


def cmd_set(args, store: ConfigStore) -> int:
    cfg = store.set(args.key, args.value)
    log.info("CONFIG_SET key=%s value=%r", args.key, getattr(cfg, args.key))
    return 0
