"""
Azure Landing Zone naming and configuration resolution.

Deterministic resource names for the landing zone modules (AVD, connectivity,
core, management, spoke) and recursive resolution of configuration overrides
against each module's defaults.
"""

from .config.resolver import ConfigResolver, resolve, resolve_module
from .engine import ResolvedDeployment, resolve_deployment
from .exceptions import (
    ConfigLoadError,
    ConfigValidationError,
    InvalidNamingContextError,
    LandingZoneError,
    SuffixStateError,
    UnknownResourcePurposeError,
)
from .naming.composer import NameComposer, compose, truncate
from .naming.context import NamingContext, NamingModule
from .naming.templates import ResourcePurpose
from .regions import RegionAbbreviator, abbreviate

__version__ = "0.1.0"

__all__ = [
    "ConfigLoadError",
    "ConfigResolver",
    "ConfigValidationError",
    "InvalidNamingContextError",
    "LandingZoneError",
    "NameComposer",
    "NamingContext",
    "NamingModule",
    "RegionAbbreviator",
    "ResolvedDeployment",
    "ResourcePurpose",
    "SuffixStateError",
    "UnknownResourcePurposeError",
    "abbreviate",
    "compose",
    "resolve",
    "resolve_deployment",
    "resolve_module",
    "truncate",
]
