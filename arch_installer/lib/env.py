from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .net import is_online

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("sgdisk", "mkfs.fat", "mkfs.f2fs", "arch-chroot", "pacstrap", "genfstab")


@dataclass(frozen=True)
class Paths:
    target_root: str = "/mnt"
    arch_release: str = "/etc/arch-release"
    efivars: str = "/sys/firmware/efi/efivars"


PATHS = Paths()


def is_root() -> bool:
    return os.geteuid() == 0


def missing_tools(tools: Sequence[str] = REQUIRED_TOOLS) -> List[str]:
    return [t for t in tools if shutil.which(t) is None]


def environment_problems(
    *,
    paths: Paths = PATHS,
    tools: Sequence[str] = REQUIRED_TOOLS,
    check_network: bool = True,
    dry_run: bool = False,
) -> List[str]:
    """Return human-readable reasons the host can't run an install (empty if fine)."""

    problems: List[str] = []
    if not is_root():
        problems.append("root privileges are required")
    if not Path(paths.arch_release).is_file():
        problems.append("not running in an Arch Linux install environment")
    if not Path(paths.efivars).is_dir():
        problems.append("system is not booted in UEFI mode")
    if check_network and not is_online(dry_run=dry_run):
        problems.append("no network connectivity")
    for tool in missing_tools(tools):
        problems.append(f"required tool not found: {tool}")
    return problems
