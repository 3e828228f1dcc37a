from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Protocol, Sequence

from .context import InstallContext
from .errors import PreconditionError, StepError

logger = logging.getLogger(__name__)

ProgressFn = Callable[[int, int, str], None]


class Step(Protocol):
    """A single installation step; runs once, in order."""

    step_id: str
    required: bool

    def run(self, ctx: InstallContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    skipped_steps: List[str]


def log_progress(index: int, total: int, step_id: str) -> None:
    logger.info("[%3d%%] (%d/%d) %s", index * 100 // total, index, total, step_id)


def _resolve_skips(steps: Sequence[Step], skip: Sequence[str]) -> set[str]:
    known = {s.step_id: s for s in steps}
    unknown = [s for s in skip if s not in known]
    if unknown:
        raise PreconditionError(f"Unknown step(s) in skip_steps: {', '.join(unknown)}")
    required = [s for s in skip if known[s].required]
    if required:
        raise PreconditionError(f"Required step(s) cannot be skipped: {', '.join(required)}")
    return set(skip)


def run_pipeline(
    ctx: InstallContext,
    steps: Sequence[Step],
    *,
    progress: ProgressFn = log_progress,
) -> PipelineResult:
    """Run steps in order; the first failure stops the run.

    No retries and no rollback: completed side effects stay in place and the
    caller unwinds mounts.
    """

    skip = _resolve_skips(steps, ctx.config.skip_steps)
    ran: List[str] = []
    skipped: List[str] = []
    total = len(steps)

    for index, step in enumerate(steps, start=1):
        progress(index, total, step.step_id)

        if step.step_id in skip:
            logger.info("Skipping step %s (configured)", step.step_id)
            skipped.append(step.step_id)
            continue

        logger.info("Running step %s", step.step_id)
        try:
            step.run(ctx)
        except StepError:
            raise
        except Exception as e:
            raise StepError(step.step_id, e) from e
        ran.append(step.step_id)

    return PipelineResult(ran_steps=ran, skipped_steps=skipped)
