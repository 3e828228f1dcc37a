from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, Tuple

from .chroot import chroot_cmd
from .files import target_path, write_file
from .pacman import pacman_install
from .storage import ROOT_MOUNT_OPTIONS

logger = logging.getLogger(__name__)


class Bootloader(str, Enum):
    UKI = "uki"
    SYSTEMD_BOOT = "systemd-boot"
    GRUB = "grub"

    @property
    def label(self) -> str:
        return {
            Bootloader.UKI: "UKI (Unified Kernel Image)",
            Bootloader.SYSTEMD_BOOT: "systemd-boot",
            Bootloader.GRUB: "GRUB",
        }[self]


DEFAULT_BOOTLOADER = Bootloader.UKI

BASE_KERNEL_FLAGS: Tuple[str, ...] = ("loglevel=3", "quiet")

UKI_IMAGE = "/boot/EFI/Linux/arch-linux.efi"
UKI_LOADER = "\\EFI\\Linux\\arch-linux.efi"

# Files each variant produces under the target root. The sets never overlap.
BOOT_ARTIFACTS: Dict[Bootloader, Tuple[str, ...]] = {
    Bootloader.UKI: ("etc/kernel/cmdline", "etc/mkinitcpio.d/linux.preset", UKI_IMAGE.lstrip("/")),
    Bootloader.SYSTEMD_BOOT: ("boot/loader/loader.conf", "boot/loader/entries/arch.conf"),
    Bootloader.GRUB: ("etc/default/grub", "boot/grub/grub.cfg"),
}

# Label each variant leaves in the firmware boot menu.
FIRMWARE_LABELS: Dict[Bootloader, str] = {
    Bootloader.UKI: "Arch Linux",
    Bootloader.SYSTEMD_BOOT: "Linux Boot Manager",
    Bootloader.GRUB: "GRUB",
}


@dataclass(frozen=True)
class KernelParams:
    """Kernel command line split the way GRUB wants it.

    root: what must always be present to find and mount the root filesystem.
    flags: everything else (verbosity, driver switches).
    """

    root: Tuple[str, ...]
    flags: Tuple[str, ...]

    @property
    def cmdline(self) -> str:
        return " ".join(self.root + self.flags)


def build_kernel_params(partuuid: str, extra: Iterable[str] = ()) -> KernelParams:
    """The single source of the kernel command line for every bootloader variant."""

    root = (f"root=PARTUUID={partuuid}", "rw", f"rootflags={ROOT_MOUNT_OPTIONS}")
    flags = BASE_KERNEL_FLAGS + tuple(p for p in extra if p)
    return KernelParams(root=root, flags=flags)


def render_uki_cmdline(params: KernelParams) -> str:
    return params.cmdline + "\n"


def render_mkinitcpio_preset() -> str:
    return (
        "# mkinitcpio preset file for the 'linux' package\n"
        "\n"
        '#ALL_config="/etc/mkinitcpio.conf"\n'
        'ALL_kver="/boot/vmlinuz-linux"\n'
        "\n"
        "PRESETS=('default')\n"
        "\n"
        '#default_config="/etc/mkinitcpio.conf"\n'
        '#default_image="/boot/initramfs-linux.img"\n'
        f'default_uki="{UKI_IMAGE}"\n'
        'default_options="--splash /usr/share/systemd/bootctl/splash-arch.bmp"\n'
    )


def render_loader_conf() -> str:
    return "default  arch.conf\ntimeout  4\nconsole-mode max\neditor   no\n"


def render_boot_entry(params: KernelParams) -> str:
    return (
        "title   Arch Linux\n"
        "linux   /vmlinuz-linux\n"
        "initrd  /initramfs-linux.img\n"
        f"options {params.cmdline}\n"
    )


def render_grub_defaults(existing: str, params: KernelParams, *, timeout: int = 2) -> str:
    """Rewrite /etc/default/grub keys, appending any that are missing."""

    settings = {
        "GRUB_TIMEOUT": str(timeout),
        "GRUB_CMDLINE_LINUX_DEFAULT": '"' + " ".join(params.flags) + '"',
        "GRUB_CMDLINE_LINUX": '"' + " ".join(params.root) + '"',
    }

    text = existing
    for key, value in settings.items():
        line = f"{key}={value}"
        text, count = re.subn(rf"^#?[ \t]*{key}=.*$", lambda _m: line, text, flags=re.MULTILINE)
        if not count:
            if text and not text.endswith("\n"):
                text += "\n"
            text += line + "\n"
    return text


def write_uki_config(target_root: str, params: KernelParams, *, dry_run: bool = False) -> None:
    write_file(target_root, "/etc/kernel/cmdline", render_uki_cmdline(params), dry_run=dry_run)
    write_file(target_root, "/etc/mkinitcpio.d/linux.preset", render_mkinitcpio_preset(), dry_run=dry_run)


def write_systemd_boot_config(target_root: str, params: KernelParams, *, dry_run: bool = False) -> None:
    write_file(target_root, "/boot/loader/loader.conf", render_loader_conf(), dry_run=dry_run)
    write_file(target_root, "/boot/loader/entries/arch.conf", render_boot_entry(params), dry_run=dry_run)


def write_grub_defaults(target_root: str, params: KernelParams, *, dry_run: bool = False) -> None:
    p = target_path(target_root, "/etc/default/grub")
    existing = p.read_text(encoding="utf-8") if (not dry_run and p.exists()) else ""
    write_file(target_root, "/etc/default/grub", render_grub_defaults(existing, params), dry_run=dry_run)


@dataclass(frozen=True)
class BootTarget:
    target_root: str
    disk: str
    efi_part_num: int
    params: KernelParams
    dry_run: bool = False


def install_uki(t: BootTarget) -> None:
    """Build a unified kernel image and register it directly with the firmware."""

    if not t.dry_run:
        (Path(t.target_root) / Path(UKI_IMAGE).parent.relative_to("/")).mkdir(parents=True, exist_ok=True)
    write_uki_config(t.target_root, t.params, dry_run=t.dry_run)
    chroot_cmd(t.target_root, ["mkinitcpio", "-P"], dry_run=t.dry_run)
    chroot_cmd(
        t.target_root,
        [
            "efibootmgr",
            "--create",
            "--disk",
            t.disk,
            "--part",
            str(t.efi_part_num),
            "--label",
            FIRMWARE_LABELS[Bootloader.UKI],
            "--loader",
            UKI_LOADER,
            "--unicode",
        ],
        dry_run=t.dry_run,
    )
    logger.info("UKI installed: %s", UKI_IMAGE)


def install_systemd_boot(t: BootTarget) -> None:
    chroot_cmd(t.target_root, ["bootctl", "install"], dry_run=t.dry_run)
    write_systemd_boot_config(t.target_root, t.params, dry_run=t.dry_run)
    chroot_cmd(t.target_root, ["mkinitcpio", "-P"], dry_run=t.dry_run)
    logger.info("systemd-boot installed")


def install_grub(t: BootTarget) -> None:
    pacman_install(t.target_root, ["grub", "efibootmgr"], dry_run=t.dry_run)
    chroot_cmd(
        t.target_root,
        [
            "grub-install",
            "--target=x86_64-efi",
            "--efi-directory=/boot",
            f"--bootloader-id={FIRMWARE_LABELS[Bootloader.GRUB]}",
        ],
        dry_run=t.dry_run,
    )
    write_grub_defaults(t.target_root, t.params, dry_run=t.dry_run)
    chroot_cmd(t.target_root, ["mkinitcpio", "-P"], dry_run=t.dry_run)
    chroot_cmd(t.target_root, ["grub-mkconfig", "-o", "/boot/grub/grub.cfg"], dry_run=t.dry_run)
    logger.info("GRUB installed")


INSTALLERS: Dict[Bootloader, Callable[[BootTarget], None]] = {
    Bootloader.UKI: install_uki,
    Bootloader.SYSTEMD_BOOT: install_systemd_boot,
    Bootloader.GRUB: install_grub,
}


def install_bootloader(bootloader: Bootloader, target: BootTarget) -> None:
    logger.info("Installing bootloader=%s cmdline=%s", bootloader.value, target.params.cmdline)
    INSTALLERS[bootloader](target)
