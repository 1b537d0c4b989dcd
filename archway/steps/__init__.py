from .step_10_partition_disk import PartitionDiskStep
from .step_15_write_fstab import WriteFstabStep
from .step_20_install_base import InstallBaseStep
from .step_25_enable_services import EnableServicesStep
from .step_30_setup_locale import SetupLocaleStep
from .step_35_boot_hooks import BootHooksStep
from .step_40_user_accounts import UserAccountsStep
from .step_45_sudoers import SudoersStep
from .step_50_install_bootloader import InstallBootloaderStep
from .step_90_deploy_continuation import DeployContinuationStep
from .step_99_reboot import RebootStep
from .step_110_set_timezone import SetTimezoneStep
from .step_120_set_hostname import SetHostnameStep
from .step_130_post_installs import PostInstallsStep
from .step_190_retire_continuation import RetireContinuationStep

__all__ = [
    "PartitionDiskStep",
    "WriteFstabStep",
    "InstallBaseStep",
    "EnableServicesStep",
    "SetupLocaleStep",
    "BootHooksStep",
    "UserAccountsStep",
    "SudoersStep",
    "InstallBootloaderStep",
    "DeployContinuationStep",
    "RebootStep",
    "SetTimezoneStep",
    "SetHostnameStep",
    "PostInstallsStep",
    "RetireContinuationStep",
]
