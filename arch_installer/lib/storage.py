from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from ..errors import CommandError, ProvisioningError
from .command import run_cmd

logger = logging.getLogger(__name__)

EFI_TYPECODE = "ef00"
LINUX_TYPECODE = "8300"

ROOT_FS_LABEL = "Arch Linux"
ROOT_FS_FEATURES = "extra_attr,inode_checksum,sb_checksum,compression"
DATA_FS_LABEL = "Data"

ROOT_MOUNT_OPTIONS = "compress_algorithm=zstd:6,compress_chksum,atgc,gc_merge,lazytime"

# Seconds to let the kernel re-read the partition table.
SETTLE_SECONDS = 2.0


@dataclass(frozen=True)
class PartitionPlan:
    disk: str
    efi_size: str = "500M"


@dataclass(frozen=True)
class PartitionResult:
    efi_part: str
    root_part: str


def partition_path(disk: str, n: int) -> str:
    # nvme namespaces use a p infix: /dev/nvme0n1p1
    if "nvme" in disk:
        return f"{disk}p{n}"
    return f"{disk}{n}"


def _wipe_gpt(disk: str, *, dry_run: bool) -> None:
    run_cmd(["sgdisk", "-Z", disk], dry_run=dry_run)
    run_cmd(["sgdisk", "-o", disk], dry_run=dry_run)


def _settle(disk: str, *, dry_run: bool) -> None:
    run_cmd(["partprobe", disk], dry_run=dry_run)
    if not dry_run:
        time.sleep(SETTLE_SECONDS)


def partition_system_disk(*, plan: PartitionPlan, dry_run: bool = False) -> PartitionResult:
    """Wipe the disk and create a GPT with an EFI partition and a root partition.

    Layout:
    - 1: EFI System (FAT32), plan.efi_size
    - 2: Linux Root, remainder of the disk
    """

    disk = plan.disk
    logger.info("Partitioning system disk=%s efi_size=%s", disk, plan.efi_size)

    try:
        _wipe_gpt(disk, dry_run=dry_run)
        run_cmd(
            ["sgdisk", "-n", f"1:0:+{plan.efi_size}", "-t", f"1:{EFI_TYPECODE}", "-c", "1:EFI System", disk],
            dry_run=dry_run,
        )
        run_cmd(
            ["sgdisk", "-n", "2:0:0", "-t", f"2:{LINUX_TYPECODE}", "-c", "2:Linux Root", disk],
            dry_run=dry_run,
        )
        _settle(disk, dry_run=dry_run)
    except CommandError as e:
        raise ProvisioningError(f"Partitioning {disk} failed: {e}") from e

    return PartitionResult(efi_part=partition_path(disk, 1), root_part=partition_path(disk, 2))


def format_system_partitions(result: PartitionResult, *, dry_run: bool = False) -> None:
    try:
        run_cmd(["mkfs.fat", "-F32", result.efi_part], dry_run=dry_run)
    except CommandError as e:
        raise ProvisioningError(f"Formatting EFI partition {result.efi_part} failed") from e

    try:
        run_cmd(
            ["mkfs.f2fs", "-f", "-l", ROOT_FS_LABEL, "-O", ROOT_FS_FEATURES, result.root_part],
            dry_run=dry_run,
        )
    except CommandError as e:
        raise ProvisioningError(f"Formatting root partition {result.root_part} failed") from e

    logger.info("Formatted efi=%s (vfat) root=%s (f2fs)", result.efi_part, result.root_part)


def provision_data_disk(disk: str, *, dry_run: bool = False) -> str:
    """Turn a whole disk into one XFS data partition and return its path."""

    logger.info("Provisioning data disk=%s", disk)
    part = partition_path(disk, 1)
    try:
        _wipe_gpt(disk, dry_run=dry_run)
        run_cmd(
            ["sgdisk", "-n", "1:0:0", "-t", f"1:{LINUX_TYPECODE}", "-c", "1:Linux Data", disk],
            dry_run=dry_run,
        )
        _settle(disk, dry_run=dry_run)
        run_cmd(["mkfs.xfs", "-f", "-L", DATA_FS_LABEL, part], dry_run=dry_run)
    except CommandError as e:
        raise ProvisioningError(f"Provisioning data disk {disk} failed: {e}") from e

    return part
