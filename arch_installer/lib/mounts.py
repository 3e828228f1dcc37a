from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..errors import CommandError, MountError
from .command import run_cmd

logger = logging.getLogger(__name__)

_NOT_MOUNTED_MARKERS = ("not mounted", "no mount point specified")


@dataclass(frozen=True)
class Mount:
    source: str
    target: str


class MountManager:
    """Track mounts made under the install root and release them in reverse order.

    Use as a context manager so the unwind runs on success, on error and on
    interrupt alike:

        with MountManager() as mounts:
            mounts.mount("/dev/sda2", "/mnt")
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run
        self._mounts: List[Mount] = []

    @property
    def active(self) -> List[Mount]:
        return list(self._mounts)

    def __enter__(self) -> "MountManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unmount_all()

    def mount(
        self,
        source: str,
        target: str,
        options: Optional[str] = None,
        *,
        bind: bool = False,
    ) -> Mount:
        if not self.dry_run:
            try:
                Path(target).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise MountError(f"Unable to create mount point {target}: {e}") from e

        argv = ["mount"]
        if bind:
            argv.append("--bind")
        if options:
            argv += ["-o", options]
        argv += [source, target]

        try:
            run_cmd(argv, dry_run=self.dry_run)
        except CommandError as e:
            raise MountError(f"Unable to mount {source} on {target}: {e.stderr.strip() or e}") from e

        m = Mount(source=source, target=target)
        self._mounts.append(m)
        logger.info("Mounted %s on %s", source, target)
        return m

    def unmount_all(self) -> None:
        """Best-effort unwind; never raises."""

        while self._mounts:
            m = self._mounts.pop()
            try:
                r = run_cmd(["umount", m.target], check=False, dry_run=self.dry_run)
            except Exception as e:
                logger.warning("Unmount of %s raised %s; ignoring", m.target, e)
                continue

            if r.ok:
                logger.info("Unmounted %s", m.target)
            elif any(marker in r.stderr.lower() for marker in _NOT_MOUNTED_MARKERS):
                logger.debug("%s was already unmounted", m.target)
            else:
                logger.warning("Failed to unmount %s (rc=%s): %s", m.target, r.returncode, r.stderr.strip())
