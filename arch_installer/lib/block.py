from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from typing import List

from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Disk:
    name: str
    size: str
    model: str


def is_block_device(path: str, *, dry_run: bool = False) -> bool:
    if dry_run:
        # Be permissive in dry-run so planning doesn't fail.
        return True
    try:
        return stat.S_ISBLK(os.stat(path).st_mode)
    except OSError:
        return False


def list_disks(*, dry_run: bool = False) -> List[Disk]:
    r = run_cmd(["lsblk", "-d", "-p", "-n", "-l", "-o", "NAME,SIZE,MODEL"], check=False, dry_run=dry_run)
    disks: List[Disk] = []
    for line in (r.stdout or "").splitlines():
        parts = line.split(None, 2)
        if not parts:
            continue
        disks.append(
            Disk(
                name=parts[0],
                size=parts[1] if len(parts) > 1 else "",
                model=parts[2].strip() if len(parts) > 2 else "",
            )
        )
    return disks


def get_partuuid(dev: str, *, dry_run: bool = False) -> str:
    """Return the GPT partition UUID for a partition device."""

    r = run_cmd(["blkid", "-s", "PARTUUID", "-o", "value", dev], dry_run=dry_run)
    partuuid = (r.stdout or "").strip()
    if not partuuid and not dry_run:
        raise RuntimeError(f"Unable to determine PARTUUID for {dev}")
    return partuuid
