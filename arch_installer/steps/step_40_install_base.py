from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib import mkinitcpio
from ..lib.pacman import pacstrap

logger = logging.getLogger(__name__)

BASE_INITRAMFS_MODULES = ["f2fs"]


class InstallBaseStep:
    step_id = "40_install_base"
    required = True

    def run(self, ctx: InstallContext) -> None:
        packages = ctx.config.base_packages
        logger.info("Installing base system (%s); this depends on network speed", " ".join(packages))
        pacstrap(ctx.target_root, packages, dry_run=ctx.dry_run)

        mkinitcpio.set_modules(ctx.target_root, BASE_INITRAMFS_MODULES, dry_run=ctx.dry_run)
        mkinitcpio.regenerate(ctx.target_root, dry_run=ctx.dry_run)
        logger.info("Base system installed at %s", ctx.target_root)
