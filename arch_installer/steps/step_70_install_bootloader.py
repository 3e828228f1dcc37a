from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.block import get_partuuid
from ..lib.bootloader import (
    DEFAULT_BOOTLOADER,
    Bootloader,
    BootTarget,
    build_kernel_params,
    install_bootloader,
)

logger = logging.getLogger(__name__)

EFI_PART_NUM = 1


class InstallBootloaderStep:
    step_id = "70_install_bootloader"
    required = True

    def run(self, ctx: InstallContext) -> None:
        ctx.state.require("target_disk", "root_partition")

        options = [(b.value, b.label) for b in Bootloader]
        choice = ctx.prompter.choose("bootloader", "Bootloader:", options, default=DEFAULT_BOOTLOADER.value)
        bootloader = Bootloader(choice)

        partuuid = get_partuuid(ctx.state.root_partition, dry_run=ctx.dry_run)
        params = build_kernel_params(partuuid, ctx.state.kernel_extra_params)

        install_bootloader(
            bootloader,
            BootTarget(
                target_root=ctx.target_root,
                disk=ctx.state.target_disk,
                efi_part_num=EFI_PART_NUM,
                params=params,
                dry_run=ctx.dry_run,
            ),
        )

        ctx.state.bootloader = bootloader
        ctx.decide("bootloader", bootloader.value)
        ctx.decide("kernel_cmdline", params.cmdline)
