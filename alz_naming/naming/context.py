"""Naming inputs shared by every landing zone module."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..exceptions import InvalidNamingContextError
from ..regions import RegionAbbreviator


class NamingModule(str, Enum):
    """Landing zone modules that own a naming table."""

    AVD = "avd"
    CONNECTIVITY = "connectivity"
    CORE = "core"
    MANAGEMENT = "management"
    SPOKE = "spoke"


@dataclass(frozen=True)
class NamingContext:
    """Per-deployment naming inputs.

    ``random_suffix`` is persisted outside the engine and passed in as-is; it
    is never generated or altered here.
    """

    environment: str
    location: str
    service: str
    random_suffix: str = ""

    @property
    def env_token(self) -> str:
        return self.environment.lower()

    @property
    def service_token(self) -> str:
        return self.service.lower()

    def tokens(self, abbreviator: Optional[RegionAbbreviator] = None) -> Dict[str, str]:
        """Resolve the substitution tokens used by name templates."""
        abbreviator = abbreviator or RegionAbbreviator()
        return {
            "env": self.env_token,
            "service": self.service_token,
            "region": abbreviator.abbreviate(self.location),
            "suffix": self.random_suffix,
        }

    @classmethod
    def for_module(
        cls,
        module: NamingModule,
        environment: str,
        location: str,
        random_suffix: str = "",
        service: Optional[str] = None,
    ) -> "NamingContext":
        """Build a context using the module's default service token.

        Args:
            module: Module whose naming table will be used
            environment: Environment name, e.g. ``"prod"``
            location: Azure region display name
            random_suffix: Persisted random suffix for the deployment
            service: Service token; required for spoke workloads

        Raises:
            InvalidNamingContextError: If no service token can be determined
        """
        from .templates import NAMING_TABLES

        module = NamingModule(module)
        service = service or NAMING_TABLES[module].default_service
        if not service:
            raise InvalidNamingContextError(
                f"Module '{module.value}' requires an explicit service (workload role)",
                field="service",
                recovery_suggestion="Pass the workload role, e.g. 'identity' or 'app'",
            )
        return cls(
            environment=environment,
            location=location,
            service=service,
            random_suffix=random_suffix,
        )
