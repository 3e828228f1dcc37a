from __future__ import annotations

import logging
from typing import Sequence

from .chroot import chroot_cmd
from .files import edit_file

logger = logging.getLogger(__name__)

CONF = "/etc/mkinitcpio.conf"


def set_modules(target_root: str, modules: Sequence[str], *, dry_run: bool = False) -> None:
    line = "MODULES=(" + " ".join(modules) + ")"
    count = edit_file(target_root, CONF, r"^MODULES=.*$", line, dry_run=dry_run)
    if not count and not dry_run:
        raise RuntimeError(f"No MODULES= line found in {CONF}")
    logger.info("mkinitcpio %s", line)


def regenerate(target_root: str, *, dry_run: bool = False) -> None:
    chroot_cmd(target_root, ["mkinitcpio", "-P"], dry_run=dry_run)
