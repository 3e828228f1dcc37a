from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.pacman import write_mirrorlist

logger = logging.getLogger(__name__)


class UpdateMirrorsStep:
    step_id = "15_update_mirrors"
    required = False

    def run(self, ctx: InstallContext) -> None:
        write_mirrorlist(ctx.config.mirrors, dry_run=ctx.dry_run)
