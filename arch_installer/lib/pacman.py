from __future__ import annotations

import logging
from typing import Sequence

from .chroot import chroot_cmd
from .command import run_cmd
from .files import backup_file, write_file

logger = logging.getLogger(__name__)

MIRRORLIST = "/etc/pacman.d/mirrorlist"


def pacstrap(target_root: str, packages: Sequence[str], *, dry_run: bool = False) -> None:
    run_cmd(["pacstrap", target_root, *packages], dry_run=dry_run)


def pacman_install(
    target_root: str,
    packages: Sequence[str],
    *,
    refresh: bool = False,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    flag = "-Sy" if refresh else "-S"
    chroot_cmd(target_root, ["pacman", flag, "--noconfirm", *packages], dry_run=dry_run)


def render_mirrorlist(servers: Sequence[str]) -> str:
    return "".join(f"Server = {s}\n" for s in servers)


def write_mirrorlist(servers: Sequence[str], *, path: str = MIRRORLIST, dry_run: bool = False) -> None:
    """Replace the live environment's mirrorlist, keeping a .backup copy."""

    backup_file(path, dry_run=dry_run)
    write_file("/", path, render_mirrorlist(servers), dry_run=dry_run)
    logger.info("Mirrorlist updated with %d server(s)", len(servers))


def render_repo_section(name: str, server: str, *, sig_level: str = "Optional TrustAll") -> str:
    return f"\n[{name}]\nSigLevel = {sig_level}\nServer = {server}\n"


def add_repository(target_root: str, name: str, server: str, *, dry_run: bool = False) -> None:
    write_file(target_root, "/etc/pacman.conf", render_repo_section(name, server), append=True, dry_run=dry_run)
    logger.info("Added pacman repository [%s] -> %s", name, server)
