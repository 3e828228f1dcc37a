from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class FstabEntry:
    spec: str
    mountpoint: str
    fstype: str
    options: str = "defaults"
    dump: int = 0
    passno: int = 0

    def render(self) -> str:
        return f"{self.spec} {self.mountpoint} {self.fstype} {self.options} {self.dump} {self.passno}"


def bind_entry(source: str, mountpoint: str) -> FstabEntry:
    return FstabEntry(spec=source, mountpoint=mountpoint, fstype="none", options="bind")


def render_fstab(entries: Iterable[FstabEntry]) -> str:
    lines = [e.render() for e in entries]
    return "\n".join(lines) + "\n" if lines else ""
