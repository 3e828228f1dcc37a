from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.pacman import add_repository, pacman_install

logger = logging.getLogger(__name__)

AUR_HELPER = "yay"


class ConfigureArchlinuxcnStep:
    step_id = "75_configure_archlinuxcn"
    required = False

    def run(self, ctx: InstallContext) -> None:
        add_repository(ctx.target_root, "archlinuxcn", ctx.config.archlinuxcn_server, dry_run=ctx.dry_run)
        pacman_install(ctx.target_root, ["archlinuxcn-keyring"], refresh=True, dry_run=ctx.dry_run)
        pacman_install(ctx.target_root, [AUR_HELPER], dry_run=ctx.dry_run)
        ctx.decide("aur_helper", AUR_HELPER)
