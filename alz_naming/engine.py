"""Deployment resolution: resource names plus resolved configuration.

This is the hand-off point to the provisioning layer. Given the deployment
inputs it produces every resource name in the module's naming table and the
fully resolved configuration tree; both are plain data.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .config.models import LandingZoneConfig
from .config.resolver import resolve_module
from .naming.composer import NameComposer
from .naming.context import NamingContext, NamingModule
from .naming.templates import ResourcePurpose
from .regions import RegionAbbreviator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedDeployment:
    """Names and configuration for one module deployment."""

    module: NamingModule
    context: NamingContext
    region: str
    names: Mapping[ResourcePurpose, str]
    config: LandingZoneConfig

    def name(self, purpose: Union[ResourcePurpose, str]) -> str:
        return self.names[ResourcePurpose(purpose)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module": self.module.value,
            "environment": self.context.environment,
            "location": self.context.location,
            "region": self.region,
            "service": self.context.service,
            "random_suffix": self.context.random_suffix,
            "names": {purpose.value: name for purpose, name in self.names.items()},
            "config": self.config.model_dump(),
        }


def resolve_deployment(
    module: Union[NamingModule, str],
    environment: str,
    location: str,
    random_suffix: str = "",
    overrides: Optional[Mapping[str, Any]] = None,
    service: Optional[str] = None,
    abbreviator: Optional[RegionAbbreviator] = None,
) -> ResolvedDeployment:
    """
    Resolve names and configuration for a module deployment.

    Configuration is resolved first so invalid overrides fail before any
    names are produced.

    Args:
        module: Landing zone module
        environment: Environment name, e.g. ``"prod"``
        location: Azure region display name, e.g. ``"West Europe"``
        random_suffix: Persisted suffix for globally unique names
        overrides: Partial configuration overrides for the module
        service: Service token; defaults per module, required for spokes
        abbreviator: Optional region abbreviator with extra regions

    Returns:
        ResolvedDeployment

    Raises:
        ConfigValidationError: If the overrides are invalid
        InvalidNamingContextError: If no service token is available
    """
    module = NamingModule(module)
    config = resolve_module(module, overrides)

    ctx = NamingContext.for_module(
        module,
        environment=environment,
        location=location,
        random_suffix=random_suffix,
        service=service,
    )
    composer = NameComposer(module, abbreviator)
    names = composer.compose_all(ctx)
    region = composer.abbreviator.abbreviate(location)

    logger.info(
        f"Resolved {module.value} deployment: environment={ctx.env_token}, "
        f"region={region}, service={ctx.service_token}, names={len(names)}"
    )

    return ResolvedDeployment(
        module=module,
        context=ctx,
        region=region,
        names=MappingProxyType(names),
        config=config,
    )
