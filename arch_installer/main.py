from __future__ import annotations

import argparse
import logging
import signal
from typing import List, Optional, Sequence

from .config import load_config
from .context import InstallContext, InstallState
from .errors import EXIT_INTERRUPTED, EXIT_OK, InstallerError, StepError
from .lib.env import PATHS
from .lib.mounts import MountManager
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, ProgressFn, Step, log_progress, run_pipeline
from .prompter import ConsolePrompter, Prompter, ScriptedPrompter
from .steps import (
    CheckEnvironmentStep,
    ConfigureArchlinuxcnStep,
    ConfigureHostnameStep,
    ConfigureLocalizationStep,
    ConfigureNetworkStep,
    DataDiskStep,
    GenerateFstabStep,
    InstallBaseStep,
    InstallBootloaderStep,
    InstallGpuDriverStep,
    InstallMicrocodeStep,
    MountFilesystemsStep,
    PrepareDiskStep,
    SetupUsersStep,
    UpdateMirrorsStep,
    VerifyInstallationStep,
)

logger = logging.getLogger(__name__)


def build_steps() -> List[Step]:
    return [
        CheckEnvironmentStep(),
        UpdateMirrorsStep(),
        PrepareDiskStep(),
        DataDiskStep(),
        MountFilesystemsStep(),
        InstallBaseStep(),
        ConfigureNetworkStep(),
        ConfigureLocalizationStep(),
        ConfigureHostnameStep(),
        InstallMicrocodeStep(),
        InstallGpuDriverStep(),
        InstallBootloaderStep(),
        ConfigureArchlinuxcnStep(),
        SetupUsersStep(),
        GenerateFstabStep(),
        VerifyInstallationStep(),
    ]


def render_final_message(state: InstallState) -> str:
    bootloader = state.bootloader.label if state.bootloader else "none"
    lines = [
        "==================================================",
        "            Arch Linux installation complete",
        "==================================================",
        f"User:        {state.username}",
        f"Hostname:    {state.hostname}",
        "Filesystem:  f2fs (compression enabled)",
        f"Bootloader:  {bootloader}",
        f"Network:     {state.network_manager}",
        "",
        "After the first boot:",
        "  sudo pacman -Syu",
        "  sudo systemctl enable fstrim.timer",
        "  sudo pacman -S noto-fonts noto-fonts-cjk   (if CJK text shows as boxes)",
        "  sudo timedatectl set-ntp true              (if the clock is off)",
    ]
    if state.kernel_extra_params:
        lines.append("  nvidia-smi                                 (check the NVIDIA driver)")
    lines += ["", "The target has been unmounted; you can reboot now."]
    return "\n".join(lines)


def _raise_on_sigterm(signum, frame) -> None:
    raise SystemExit(128 + signum)


def install(
    ctx: InstallContext,
    steps: Sequence[Step],
    *,
    progress: ProgressFn = log_progress,
) -> PipelineResult:
    """Run the steps inside the mount scope: mounts are released however the run ends."""

    with ctx.mounts:
        return run_pipeline(ctx, steps, progress=progress)


def run(
    *,
    config_path: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    target_root: str = PATHS.target_root,
    dry_run: bool = False,
    debug: bool = False,
    prompter: Optional[Prompter] = None,
    steps: Optional[Sequence[Step]] = None,
) -> int:
    """Run the installer and return the process exit code."""

    actual_log_path = configure_logging(log_path=log_path, level=logging.DEBUG if debug else logging.INFO)

    try:
        config = load_config(config_path)
        if prompter is None:
            prompter = ScriptedPrompter(config.answers) if config.answers else ConsolePrompter()
    except InstallerError as e:
        logger.error("%s", e)
        return e.exit_code

    ctx = InstallContext(
        config=config,
        prompter=prompter,
        mounts=MountManager(dry_run=dry_run),
        target_root=target_root,
        dry_run=dry_run,
    )

    previous = signal.signal(signal.SIGTERM, _raise_on_sigterm)
    try:
        result = install(ctx, steps if steps is not None else build_steps())
    except StepError as e:
        logger.error("Installation failed at step %s: %s", e.step_id, e.cause)
        logger.info("State at failure: %s", ctx.state.summary())
        logger.info("Full log: %s", actual_log_path)
        return e.exit_code
    except InstallerError as e:
        logger.error("%s", e)
        return e.exit_code
    except KeyboardInterrupt:
        logger.error("Interrupted; mounts have been released")
        return EXIT_INTERRUPTED
    finally:
        signal.signal(signal.SIGTERM, previous)

    logger.info("Ran %d step(s), skipped %s", len(result.ran_steps), result.skipped_steps or "none")
    logger.info("Decisions: %s", ctx.state.decisions)
    logger.info("\n%s", render_final_message(ctx.state))
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="arch-installer", description="Interactive Arch Linux installer")
    p.add_argument("--config", default=None, help="Settings and scripted answers (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--target-root", default=PATHS.target_root, help="Where the new system is mounted")
    p.add_argument("--dry-run", action="store_true", help="Log commands instead of running them")
    p.add_argument("--debug", action="store_true", help="Show command output on the console")

    args = p.parse_args(argv)

    return run(
        config_path=args.config,
        log_path=args.log,
        target_root=args.target_root,
        dry_run=args.dry_run,
        debug=args.debug,
    )
