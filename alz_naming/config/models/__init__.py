"""
Configuration models for landing zone modules.

Provides type-safe configuration using pydantic with validation,
defaults, and schema enforcement.
"""

from typing import Dict, Type

from ...naming.context import NamingModule
from .avd import (
    ApplicationGroupConfig,
    AvdConfig,
    AvdNetworkConfig,
    FslogixConfig,
    HostPoolConfig,
    ImageBuilderConfig,
    MarketplaceImage,
    ScalingPlanConfig,
    ScalingSchedule,
    SessionHostsConfig,
    WorkspaceConfig,
)
from .base import REPLACE, LandingZoneConfig, NsgRule, SubnetConfig
from .connectivity import (
    BastionConfig,
    ConnectivityConfig,
    FirewallConfig,
    FirewallPolicyConfig,
    HubVirtualNetworkConfig,
    RuleCollectionGroup,
    VpnGatewayConfig,
)
from .core import CoreConfig, ManagementGroupConfig, RootManagementGroupConfig
from .management import (
    BackupPolicyConfig,
    LogAnalyticsConfig,
    ManagementConfig,
    RecoveryServicesVaultConfig,
)
from .spoke import HubPeeringConfig, KeyVaultConfig, SpokeConfig, StorageConfig

MODULE_CONFIG_MODELS: Dict[NamingModule, Type[LandingZoneConfig]] = {
    NamingModule.AVD: AvdConfig,
    NamingModule.CONNECTIVITY: ConnectivityConfig,
    NamingModule.CORE: CoreConfig,
    NamingModule.MANAGEMENT: ManagementConfig,
    NamingModule.SPOKE: SpokeConfig,
}


def default_config(module: NamingModule) -> LandingZoneConfig:
    """Fully defaulted configuration tree for a module."""
    return MODULE_CONFIG_MODELS[NamingModule(module)]()


__all__ = [
    "MODULE_CONFIG_MODELS",
    "REPLACE",
    "ApplicationGroupConfig",
    "AvdConfig",
    "AvdNetworkConfig",
    "BackupPolicyConfig",
    "BastionConfig",
    "ConnectivityConfig",
    "CoreConfig",
    "FirewallConfig",
    "FirewallPolicyConfig",
    "FslogixConfig",
    "HostPoolConfig",
    "HubPeeringConfig",
    "HubVirtualNetworkConfig",
    "ImageBuilderConfig",
    "KeyVaultConfig",
    "LandingZoneConfig",
    "LogAnalyticsConfig",
    "ManagementConfig",
    "ManagementGroupConfig",
    "MarketplaceImage",
    "NsgRule",
    "RecoveryServicesVaultConfig",
    "RootManagementGroupConfig",
    "RuleCollectionGroup",
    "ScalingPlanConfig",
    "ScalingSchedule",
    "SessionHostsConfig",
    "SpokeConfig",
    "StorageConfig",
    "SubnetConfig",
    "VpnGatewayConfig",
    "WorkspaceConfig",
    "default_config",
]
