from __future__ import annotations

import logging
from pathlib import Path

from ..context import InstallContext
from ..lib.storage import ROOT_MOUNT_OPTIONS

logger = logging.getLogger(__name__)


class MountFilesystemsStep:
    step_id = "30_mount_filesystems"
    required = True

    def run(self, ctx: InstallContext) -> None:
        ctx.state.require("root_partition", "efi_partition")
        root = Path(ctx.target_root)
        mounts = ctx.mounts

        mounts.mount(ctx.state.root_partition, str(root), ROOT_MOUNT_OPTIONS)
        mounts.mount(ctx.state.efi_partition, str(root / "boot"))

        if not ctx.dry_run:
            (root / "boot/EFI/Linux").mkdir(parents=True, exist_ok=True)
            (root / "var").mkdir(parents=True, exist_ok=True)

        if ctx.state.data_partition:
            # The data disk lives at /mnt inside the target; /var is kept on it.
            data_root = root / "mnt"
            mounts.mount(ctx.state.data_partition, str(data_root))
            if not ctx.dry_run:
                (data_root / "var").mkdir(parents=True, exist_ok=True)
            mounts.mount(str(data_root / "var"), str(root / "var"), bind=True)

        for m in mounts.active:
            logger.info("Active mount: %s -> %s", m.source, m.target)
