from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import InstallerConfig
from .lib.bootloader import Bootloader
from .lib.mounts import MountManager
from .prompter import Prompter


@dataclass
class InstallState:
    """Facts discovered while installing, filled in step by step."""

    target_disk: Optional[str] = None
    efi_partition: Optional[str] = None
    root_partition: Optional[str] = None
    data_disk: Optional[str] = None
    data_partition: Optional[str] = None
    bootloader: Optional[Bootloader] = None
    username: Optional[str] = None
    hostname: Optional[str] = None
    network_manager: Optional[str] = None
    kernel_extra_params: List[str] = field(default_factory=list)
    decisions: Dict[str, Any] = field(default_factory=dict)

    def require(self, *names: str) -> None:
        missing = [n for n in names if not getattr(self, n)]
        if missing:
            raise RuntimeError(f"Missing install state: {', '.join(missing)}; run the earlier steps first")

    def summary(self) -> Dict[str, Any]:
        return {
            "target_disk": self.target_disk,
            "efi_partition": self.efi_partition,
            "root_partition": self.root_partition,
            "data_partition": self.data_partition,
            "bootloader": self.bootloader.value if self.bootloader else None,
            "username": self.username,
            "hostname": self.hostname,
            "network_manager": self.network_manager,
            "decisions": dict(self.decisions),
        }


@dataclass
class InstallContext:
    config: InstallerConfig
    prompter: Prompter
    mounts: MountManager
    target_root: str = "/mnt"
    dry_run: bool = False
    state: InstallState = field(default_factory=InstallState)

    def decide(self, key: str, value: Any) -> None:
        self.state.decisions[key] = value
