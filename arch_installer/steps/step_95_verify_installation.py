from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..context import InstallContext
from ..errors import InstallAborted
from ..lib.bootloader import BOOT_ARTIFACTS, FIRMWARE_LABELS
from ..lib.chroot import chroot_cmd, chroot_succeeds

logger = logging.getLogger(__name__)

REQUIRED_FILES = [
    "etc/fstab",
    "etc/hostname",
    "etc/locale.gen",
    "etc/locale.conf",
    "etc/hosts",
]

NETWORK_CONFIG_DIRS = ["etc/systemd/network", "etc/NetworkManager"]


def verification_errors(ctx: InstallContext) -> List[str]:
    root = Path(ctx.target_root)
    errors: List[str] = []

    expected = list(REQUIRED_FILES)
    if ctx.state.bootloader:
        expected += BOOT_ARTIFACTS[ctx.state.bootloader]
    for rel in expected:
        if not (root / rel).exists():
            errors.append(f"missing {root / rel}")

    if ctx.state.username and not chroot_succeeds(ctx.target_root, ["id", ctx.state.username]):
        errors.append(f"user {ctx.state.username} was not created")

    if not any((root / d).exists() for d in NETWORK_CONFIG_DIRS):
        errors.append("network configuration incomplete")

    if ctx.state.bootloader:
        label = FIRMWARE_LABELS[ctx.state.bootloader]
        r = chroot_cmd(ctx.target_root, ["efibootmgr"], check=False)
        if label not in r.stdout:
            errors.append(f"no firmware boot entry labelled {label!r}")
    else:
        errors.append("no bootloader configured")

    return errors


class VerifyInstallationStep:
    step_id = "95_verify_installation"
    required = True

    def run(self, ctx: InstallContext) -> None:
        if ctx.dry_run:
            logger.info("Verification skipped in dry-run")
            return

        errors = verification_errors(ctx)
        ctx.decide("verification_errors", errors)
        if not errors:
            logger.info("Installation verified")
            return

        for e in errors:
            logger.warning("Verification: %s", e)

        accept = ctx.config.accept_failed_verification
        source = "config"
        if accept is None:
            source = "operator"
            ctx.prompter.show(
                f"Verification found {len(errors)} problem(s); the system may still boot. "
                "Review the configuration before rebooting."
            )
            accept = ctx.prompter.confirm("accept_failed_verification", "Continue anyway?", default=False)

        ctx.decide("accepted_failed_verification", {"accepted": accept, "by": source, "errors": len(errors)})
        if not accept:
            raise InstallAborted(f"Installation verification failed ({len(errors)} problem(s)); aborted by {source}")
        logger.warning("Continuing despite %d verification problem(s) (accepted by %s)", len(errors), source)
