from __future__ import annotations

import logging
from typing import Optional

from ..context import InstallContext
from ..errors import UserDeclined
from ..lib.block import is_block_device, list_disks
from ..lib.storage import PartitionPlan, format_system_partitions, partition_system_disk

logger = logging.getLogger(__name__)


def show_disks(ctx: InstallContext) -> None:
    ctx.prompter.show("Available disks:")
    ctx.prompter.show("----------------")
    for d in list_disks(dry_run=ctx.dry_run):
        ctx.prompter.show(f"{d.name}\t{d.size}\t{d.model}")
    ctx.prompter.show("----------------")


def confirm_destructive(ctx: InstallContext, key: str, message: str) -> None:
    if not ctx.prompter.confirm(key, message, default=False):
        raise UserDeclined(message)


def select_disk(
    ctx: InstallContext,
    *,
    key: str,
    message: str,
    warning: str,
    exclude: Optional[str] = None,
) -> str:
    """Ask for a block device until one is given and the wipe is confirmed."""

    show_disks(ctx)
    while True:
        disk = ctx.prompter.ask(key, message).strip()
        if exclude and disk == exclude:
            ctx.prompter.show(f"Error: {disk} is the system disk, choose another one")
            continue
        if not is_block_device(disk, dry_run=ctx.dry_run):
            ctx.prompter.show(f"Error: {disk!r} is not a block device, choose again")
            continue

        try:
            confirm_destructive(ctx, f"confirm_{key}", warning.format(disk=disk))
        except UserDeclined:
            logger.info("Wipe of %s declined; asking again", disk)
            continue

        logger.info("Selected %s (%s)", disk, key)
        return disk


class PrepareDiskStep:
    step_id = "20_prepare_disk"
    required = True

    def run(self, ctx: InstallContext) -> None:
        disk = select_disk(
            ctx,
            key="disk",
            message="Disk to install to (e.g. /dev/sda)",
            warning="WARNING: this erases ALL data on {disk}. Continue?",
        )
        ctx.state.target_disk = disk

        result = partition_system_disk(
            plan=PartitionPlan(disk=disk, efi_size=ctx.config.efi_size),
            dry_run=ctx.dry_run,
        )
        format_system_partitions(result, dry_run=ctx.dry_run)

        ctx.state.efi_partition = result.efi_part
        ctx.state.root_partition = result.root_part
        logger.info("Prepared disk=%s efi=%s root=%s", disk, result.efi_part, result.root_part)
