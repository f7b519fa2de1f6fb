"""Deterministic resource naming for landing zone modules."""

from .composer import NameComposer, compose, render, truncate
from .context import NamingContext, NamingModule
from .suffix_store import SuffixStore, deployment_key, generate_suffix
from .templates import (
    NAMING_TABLES,
    ModuleNaming,
    NameTemplate,
    ResourcePurpose,
    get_module_naming,
)

__all__ = [
    "NAMING_TABLES",
    "ModuleNaming",
    "NameComposer",
    "NameTemplate",
    "NamingContext",
    "NamingModule",
    "ResourcePurpose",
    "SuffixStore",
    "compose",
    "deployment_key",
    "generate_suffix",
    "get_module_naming",
    "render",
    "truncate",
]
