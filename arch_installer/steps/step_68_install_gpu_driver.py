from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib import mkinitcpio
from ..lib.pacman import pacman_install
from .step_40_install_base import BASE_INITRAMFS_MODULES

logger = logging.getLogger(__name__)

NVIDIA_DRIVERS = {
    "nvidia-open": ["nvidia-open", "nvidia-utils", "nvidia-settings"],
    "nvidia": ["nvidia", "nvidia-utils", "nvidia-settings"],
}

NVIDIA_MODULES = ["nvidia", "nvidia_modeset", "nvidia_uvm", "nvidia_drm"]
NVIDIA_KERNEL_PARAMS = ["ibt=off", "nvidia_drm.modeset=1"]

GPU_OPTIONS = [
    ("none", "Do not install"),
    ("nvidia-open", "nvidia-open (open kernel modules)"),
    ("nvidia", "nvidia (proprietary)"),
]


class InstallGpuDriverStep:
    """Runs before the bootloader step so the kernel params are rendered once."""

    step_id = "68_install_gpu_driver"
    required = False

    def run(self, ctx: InstallContext) -> None:
        choice = ctx.prompter.choose("gpu_driver", "Install an NVIDIA driver?", GPU_OPTIONS, default="none")
        ctx.decide("gpu_driver", choice)
        if choice == "none":
            logger.info("Skipping NVIDIA driver")
            return

        pacman_install(ctx.target_root, NVIDIA_DRIVERS[choice], dry_run=ctx.dry_run)
        mkinitcpio.set_modules(ctx.target_root, BASE_INITRAMFS_MODULES + NVIDIA_MODULES, dry_run=ctx.dry_run)

        for p in NVIDIA_KERNEL_PARAMS:
            if p not in ctx.state.kernel_extra_params:
                ctx.state.kernel_extra_params.append(p)
        logger.info("Installed %s driver; extra kernel params: %s", choice, " ".join(NVIDIA_KERNEL_PARAMS))
