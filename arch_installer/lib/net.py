from __future__ import annotations

import logging
from typing import List

from .command import run_cmd

logger = logging.getLogger(__name__)

PROBE_HOST = "archlinux.org"


def is_online(*, host: str = PROBE_HOST, dry_run: bool = False) -> bool:
    """Best-effort online check."""

    r = run_cmd(["ping", "-c", "1", "-W", "3", host], check=False, dry_run=dry_run)
    return r.ok


def list_interfaces(*, dry_run: bool = False) -> List[str]:
    r = run_cmd(["ip", "-o", "link", "show"], check=False, dry_run=dry_run)
    names: List[str] = []
    for line in (r.stdout or "").splitlines():
        # "2: enp3s0: <BROADCAST,...> ..." ; vlan names carry an @parent suffix
        parts = line.split(":", 2)
        if len(parts) < 2:
            continue
        name = parts[1].strip().split("@", 1)[0]
        if name and name != "lo":
            names.append(name)
    return names


def interface_exists(name: str, *, dry_run: bool = False) -> bool:
    if not name:
        return False
    return run_cmd(["ip", "link", "show", name], check=False, dry_run=dry_run).ok


def is_wireless(name: str) -> bool:
    return name.startswith("wl")
