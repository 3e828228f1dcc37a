from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.command import run_cmd
from ..lib.files import write_file

logger = logging.getLogger(__name__)


class GenerateFstabStep:
    step_id = "90_generate_fstab"
    required = True

    def run(self, ctx: InstallContext) -> None:
        r = run_cmd(["genfstab", "-U", ctx.target_root], dry_run=ctx.dry_run)
        write_file(ctx.target_root, "/etc/fstab", r.stdout, append=True, dry_run=ctx.dry_run)
        logger.info("fstab generated")
