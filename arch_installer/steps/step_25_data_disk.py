from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.storage import provision_data_disk
from .step_20_prepare_disk import select_disk

logger = logging.getLogger(__name__)


class DataDiskStep:
    step_id = "25_data_disk"
    required = False

    def run(self, ctx: InstallContext) -> None:
        ctx.state.require("target_disk")

        if not ctx.prompter.confirm("add_data_disk", "Add a separate data disk?", default=False):
            logger.info("No data disk")
            return

        disk = select_disk(
            ctx,
            key="data_disk",
            message=f"Data disk (e.g. /dev/sdb, not the system disk {ctx.state.target_disk})",
            warning="WARNING: this formats the whole of {disk} as XFS; all data will be lost. Continue?",
            exclude=ctx.state.target_disk,
        )
        ctx.state.data_disk = disk
        ctx.state.data_partition = provision_data_disk(disk, dry_run=ctx.dry_run)
        logger.info("Data partition ready: %s", ctx.state.data_partition)
