from __future__ import annotations

import logging

from ..context import InstallContext
from ..errors import PreconditionError
from ..lib.env import environment_problems

logger = logging.getLogger(__name__)


class CheckEnvironmentStep:
    step_id = "10_check_environment"
    required = True

    def run(self, ctx: InstallContext) -> None:
        problems = environment_problems(dry_run=ctx.dry_run)
        if not problems:
            logger.info("Environment checks passed")
            return

        if ctx.dry_run:
            for p in problems:
                logger.warning("Ignoring in dry-run: %s", p)
            return

        raise PreconditionError("Environment checks failed: " + "; ".join(problems))
