"""
Configuration management for landing zone modules.

Provides type-safe default configuration trees, recursive override
resolution, and loading of overrides from files and environment variables.
"""

from .loader import ConfigLoader, create_default_config, load_config
from .models import (
    MODULE_CONFIG_MODELS,
    AvdConfig,
    ConnectivityConfig,
    CoreConfig,
    HostPoolConfig,
    LandingZoneConfig,
    ManagementConfig,
    ScalingPlanConfig,
    ScalingSchedule,
    SpokeConfig,
    default_config,
)
from .resolver import ConfigResolver, FieldKind, classify_field, resolve, resolve_module

__all__ = [
    "MODULE_CONFIG_MODELS",
    # Models
    "AvdConfig",
    # Loader
    "ConfigLoader",
    # Resolver
    "ConfigResolver",
    "ConnectivityConfig",
    "CoreConfig",
    "FieldKind",
    "HostPoolConfig",
    "LandingZoneConfig",
    "ManagementConfig",
    "ScalingPlanConfig",
    "ScalingSchedule",
    "SpokeConfig",
    "classify_field",
    "create_default_config",
    "default_config",
    "load_config",
    "resolve",
    "resolve_module",
]
