from .step_10_check_environment import CheckEnvironmentStep
from .step_15_update_mirrors import UpdateMirrorsStep
from .step_20_prepare_disk import PrepareDiskStep
from .step_25_data_disk import DataDiskStep
from .step_30_mount_filesystems import MountFilesystemsStep
from .step_40_install_base import InstallBaseStep
from .step_50_configure_network import ConfigureNetworkStep
from .step_55_configure_localization import ConfigureLocalizationStep
from .step_60_configure_hostname import ConfigureHostnameStep
from .step_65_install_microcode import InstallMicrocodeStep
from .step_68_install_gpu_driver import InstallGpuDriverStep
from .step_70_install_bootloader import InstallBootloaderStep
from .step_75_configure_archlinuxcn import ConfigureArchlinuxcnStep
from .step_80_setup_users import SetupUsersStep
from .step_90_generate_fstab import GenerateFstabStep
from .step_95_verify_installation import VerifyInstallationStep

__all__ = [
    "CheckEnvironmentStep",
    "UpdateMirrorsStep",
    "PrepareDiskStep",
    "DataDiskStep",
    "MountFilesystemsStep",
    "InstallBaseStep",
    "ConfigureNetworkStep",
    "ConfigureLocalizationStep",
    "ConfigureHostnameStep",
    "InstallMicrocodeStep",
    "InstallGpuDriverStep",
    "InstallBootloaderStep",
    "ConfigureArchlinuxcnStep",
    "SetupUsersStep",
    "GenerateFstabStep",
    "VerifyInstallationStep",
]
