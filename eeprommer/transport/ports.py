# eeprommer/transport/ports.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from serial.tools import list_ports


@dataclass(frozen=True)
class PortInfo:
    device: str
    hwid: str = ""
    manufacturer: str = ""
    description: str = ""

    def as_line(self) -> str:
        return f"{self.device}\t{self.hwid}\t{self.manufacturer}"


def list_candidates() -> List[PortInfo]:
    """Return the serial ports the OS knows about, sorted by device path."""
    out: List[PortInfo] = []
    for p in list_ports.comports():
        hwid = p.hwid if p.hwid and p.hwid != "n/a" else ""
        out.append(
            PortInfo(
                device=p.device,
                hwid=hwid,
                manufacturer=p.manufacturer or "",
                description=p.description if p.description and p.description != "n/a" else "",
            )
        )
    return sorted(out, key=lambda p: p.device)
