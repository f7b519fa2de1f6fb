"""
Configuration models for the core (governance) module.

Describes the ALZ management group hierarchy, subscription placement and the
default values passed into policy assignments.
"""

from typing import Dict, List, Optional

from pydantic import Field, StrictBool, StrictStr, model_validator

from .base import LandingZoneConfig

ROOT_PARENT = "root"


class RootManagementGroupConfig(LandingZoneConfig):
    id: StrictStr = "alz"
    display_name: StrictStr = "Azure Landing Zones"
    parent_id: Optional[StrictStr] = Field(
        default=None,
        description="Parent management group id; None places it under the tenant root",
    )


class ManagementGroupConfig(LandingZoneConfig):
    """A management group below the root; the map key becomes its id suffix."""

    display_name: StrictStr
    parent: StrictStr = ROOT_PARENT
    archetype: StrictStr
    subscription_ids: List[StrictStr] = Field(default_factory=list)


def default_management_groups() -> Dict[str, Dict[str, str]]:
    return {
        "platform": {"display_name": "Platform", "parent": ROOT_PARENT, "archetype": "platform"},
        "management": {"display_name": "Management", "parent": "platform", "archetype": "management"},
        "connectivity": {"display_name": "Connectivity", "parent": "platform", "archetype": "connectivity"},
        "identity": {"display_name": "Identity", "parent": "platform", "archetype": "identity"},
        "landingzones": {"display_name": "Landing Zones", "parent": ROOT_PARENT, "archetype": "landing_zones"},
        "corp": {"display_name": "Corp", "parent": "landingzones", "archetype": "corp"},
        "online": {"display_name": "Online", "parent": "landingzones", "archetype": "online"},
        "sandbox": {"display_name": "Sandbox", "parent": ROOT_PARENT, "archetype": "sandbox"},
        "decommissioned": {"display_name": "Decommissioned", "parent": ROOT_PARENT, "archetype": "decommissioned"},
    }


class SubscriptionPlacementConfig(LandingZoneConfig):
    management: StrictStr = ""
    connectivity: StrictStr = ""
    identity: StrictStr = ""


class PolicyDefaultValuesConfig(LandingZoneConfig):
    log_analytics_workspace_id: StrictStr = ""
    ama_user_assigned_managed_identity_id: StrictStr = ""
    ama_vm_insights_data_collection_rule_id: StrictStr = ""
    ddos_protection_plan_id: StrictStr = ""
    private_dns_zone_subscription_id: StrictStr = ""
    private_dns_zone_resource_group_name: StrictStr = ""
    email_security_contact: StrictStr = ""


class CoreConfig(LandingZoneConfig):
    """Root configuration for the core (management group and policy) module."""

    root_management_group: RootManagementGroupConfig = Field(
        default_factory=RootManagementGroupConfig
    )
    management_groups: Dict[StrictStr, ManagementGroupConfig] = Field(
        default_factory=default_management_groups,
        description="Management groups keyed by id suffix; replaces the defaults",
    )
    subscription_placement: SubscriptionPlacementConfig = Field(
        default_factory=SubscriptionPlacementConfig
    )
    policy_default_values: PolicyDefaultValuesConfig = Field(
        default_factory=PolicyDefaultValuesConfig
    )
    policy_assignments_to_disable: List[StrictStr] = Field(default_factory=list)
    enable_telemetry: StrictBool = True

    @model_validator(mode="after")
    def validate_hierarchy(self) -> "CoreConfig":
        """Parents must exist and the hierarchy must be acyclic."""
        groups = self.management_groups
        for key, group in groups.items():
            if group.parent != ROOT_PARENT and group.parent not in groups:
                raise ValueError(
                    f"Management group '{key}' has unknown parent '{group.parent}'"
                )

        for key in groups:
            seen = {key}
            parent = groups[key].parent
            while parent != ROOT_PARENT:
                if parent in seen:
                    raise ValueError(f"Management group hierarchy has a cycle at '{key}'")
                seen.add(parent)
                parent = groups[parent].parent
        return self

    def management_group_id(self, key: str) -> str:
        """Full management group id for a map key, e.g. ``alz-platform``."""
        return f"{self.root_management_group.id}-{key}"

    def depth_of(self, key: str) -> int:
        """Depth below the root management group (direct children are 1)."""
        depth = 1
        parent = self.management_groups[key].parent
        while parent != ROOT_PARENT:
            depth += 1
            parent = self.management_groups[parent].parent
        return depth
