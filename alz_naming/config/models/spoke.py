"""Configuration models for workload spoke modules (identity, infra, app, ...)."""

import ipaddress
from typing import Annotated, Dict, List, Literal

from pydantic import (
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from ..rule_tables import default_spoke_nsg_rules
from .base import (
    LandingZoneConfig,
    NsgRule,
    SubnetConfig,
    check_subnets_in_address_space,
    check_unique_rules,
    validate_address_space,
)


def default_spoke_subnets() -> Dict[str, Dict[str, str]]:
    return {
        "workload": {"address_prefix": "10.1.0.0/25"},
        "private_endpoints": {
            "address_prefix": "10.1.0.128/26",
            "private_endpoint_network_policies": "Disabled",
        },
    }


class SpokeVirtualNetworkConfig(LandingZoneConfig):
    address_space: List[StrictStr] = Field(default_factory=lambda: ["10.1.0.0/24"])
    dns_servers: List[StrictStr] = Field(default_factory=list)
    subnets: Dict[StrictStr, SubnetConfig] = Field(
        default_factory=default_spoke_subnets,
        description="Subnets keyed by role; supplying this map replaces the defaults",
    )

    @field_validator("address_space")
    @classmethod
    def check_address_space(cls, v: List[str]) -> List[str]:
        return validate_address_space(v)

    @model_validator(mode="after")
    def validate_subnets(self) -> "SpokeVirtualNetworkConfig":
        check_subnets_in_address_space(self.address_space, self.subnets)
        return self


class HubPeeringConfig(LandingZoneConfig):
    enabled: StrictBool = True
    hub_virtual_network_id: StrictStr = ""
    allow_forwarded_traffic: StrictBool = True
    allow_gateway_transit: StrictBool = False
    use_remote_gateways: StrictBool = False


class RouteTableConfig(LandingZoneConfig):
    """Default route to the hub firewall."""

    enabled: StrictBool = True
    next_hop_ip_address: StrictStr = Field(
        default="", description="Hub firewall private IP; empty until the hub exists"
    )
    bgp_route_propagation_enabled: StrictBool = False

    @field_validator("next_hop_ip_address")
    @classmethod
    def validate_next_hop(cls, v: str) -> str:
        if v:
            try:
                ipaddress.ip_address(v)
            except ValueError as e:
                raise ValueError(f"'{v}' is not a valid IP address") from e
        return v


class KeyVaultConfig(LandingZoneConfig):
    sku: Literal["standard", "premium"] = "standard"
    purge_protection_enabled: StrictBool = True
    soft_delete_retention_days: Annotated[StrictInt, Field(ge=7, le=90)] = 7
    rbac_authorization_enabled: StrictBool = True
    public_network_access_enabled: StrictBool = False


class StorageConfig(LandingZoneConfig):
    account_tier: Literal["Standard", "Premium"] = "Standard"
    account_replication_type: Literal["LRS", "ZRS", "GRS", "RAGRS", "GZRS", "RAGZRS"] = (
        "ZRS"
    )
    account_kind: Literal["StorageV2", "BlockBlobStorage", "FileStorage"] = "StorageV2"
    shared_access_key_enabled: StrictBool = False


class SpokeConfig(LandingZoneConfig):
    """Root configuration for a workload spoke."""

    virtual_network: SpokeVirtualNetworkConfig = Field(
        default_factory=SpokeVirtualNetworkConfig
    )
    hub_peering: HubPeeringConfig = Field(default_factory=HubPeeringConfig)
    route_table: RouteTableConfig = Field(default_factory=RouteTableConfig)
    nsg_rules: List[NsgRule] = Field(default_factory=default_spoke_nsg_rules)
    key_vault: KeyVaultConfig = Field(default_factory=KeyVaultConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @field_validator("nsg_rules")
    @classmethod
    def check_nsg_rules(cls, v: List[NsgRule]) -> List[NsgRule]:
        return check_unique_rules(v)

    @model_validator(mode="after")
    def validate_gateway_use(self) -> "SpokeConfig":
        if self.hub_peering.use_remote_gateways and not self.hub_peering.enabled:
            raise ValueError("use_remote_gateways requires hub peering")
        return self
