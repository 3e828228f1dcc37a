from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.pacman import pacman_install

logger = logging.getLogger(__name__)

MICROCODE_PACKAGES = {
    "intel": "intel-ucode",
    "amd": "amd-ucode",
}


class InstallMicrocodeStep:
    step_id = "65_install_microcode"
    required = True

    def run(self, ctx: InstallContext) -> None:
        vendor = ctx.prompter.choose("cpu_vendor", "CPU vendor:", [("intel", "Intel"), ("amd", "AMD")])
        pkg = MICROCODE_PACKAGES[vendor]
        pacman_install(ctx.target_root, [pkg], dry_run=ctx.dry_run)
        ctx.decide("microcode", pkg)
        logger.info("Installed %s", pkg)
