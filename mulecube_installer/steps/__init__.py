from .step_10_preflight import PreflightStep
from .step_20_install_packages import InstallPackagesStep
from .step_30_install_docker import InstallDockerStep
from .step_40_clone_repository import CloneRepositoryStep
from .step_50_configure_access_point import ConfigureAccessPointStep
from .step_55_configure_routing import ConfigureRoutingStep
from .step_60_enable_i2c import EnableI2CStep
from .step_70_write_helper_scripts import WriteHelperScriptsStep
from .step_80_enable_services import EnableServicesStep
from .step_90_summary import SummaryStep

__all__ = [
    "PreflightStep",
    "InstallPackagesStep",
    "InstallDockerStep",
    "CloneRepositoryStep",
    "ConfigureAccessPointStep",
    "ConfigureRoutingStep",
    "EnableI2CStep",
    "WriteHelperScriptsStep",
    "EnableServicesStep",
    "SummaryStep",
]
