"""
Configuration models for the hub connectivity module.

Covers the hub virtual network, Azure Firewall and its policy rule collection
groups, Azure Bastion, the VPN gateway and the private DNS resolver.
"""

from typing import Annotated, Dict, List, Literal

from pydantic import (
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from ..rule_tables import default_bastion_nsg_rules, default_firewall_rule_collection_groups
from .base import (
    LandingZoneConfig,
    NsgRule,
    SubnetConfig,
    check_subnets_in_address_space,
    check_unique_rules,
    validate_address_space,
)

RulePriority = Annotated[StrictInt, Field(ge=100, le=65000)]

# Subnet map keys each hub feature depends on
FIREWALL_SUBNET_KEY = "firewall"
FIREWALL_MANAGEMENT_SUBNET_KEY = "firewall_management"
BASTION_SUBNET_KEY = "bastion"
GATEWAY_SUBNET_KEY = "gateway"
DNS_RESOLVER_INBOUND_SUBNET_KEY = "dns_resolver_inbound"


def default_hub_subnets() -> Dict[str, Dict[str, str]]:
    return {
        FIREWALL_SUBNET_KEY: {"address_prefix": "10.0.0.0/26"},
        FIREWALL_MANAGEMENT_SUBNET_KEY: {"address_prefix": "10.0.0.64/26"},
        BASTION_SUBNET_KEY: {"address_prefix": "10.0.1.0/26"},
        GATEWAY_SUBNET_KEY: {"address_prefix": "10.0.2.0/27"},
        DNS_RESOLVER_INBOUND_SUBNET_KEY: {
            "address_prefix": "10.0.3.0/28",
            "delegation": "Microsoft.Network/dnsResolvers",
        },
    }


class HubVirtualNetworkConfig(LandingZoneConfig):
    """Hub virtual network and its special-purpose subnets."""

    address_space: List[StrictStr] = Field(default_factory=lambda: ["10.0.0.0/16"])
    dns_servers: List[StrictStr] = Field(default_factory=list)
    subnets: Dict[StrictStr, SubnetConfig] = Field(
        default_factory=default_hub_subnets,
        description="Subnets keyed by role; supplying this map replaces the defaults",
    )
    ddos_protection_plan_id: StrictStr = ""

    @field_validator("address_space")
    @classmethod
    def check_address_space(cls, v: List[str]) -> List[str]:
        return validate_address_space(v)

    @model_validator(mode="after")
    def validate_subnets(self) -> "HubVirtualNetworkConfig":
        check_subnets_in_address_space(self.address_space, self.subnets)
        return self


class FirewallConfig(LandingZoneConfig):
    """Azure Firewall instance settings."""

    enabled: StrictBool = True
    sku_tier: Literal["Basic", "Standard", "Premium"] = "Standard"
    threat_intel_mode: Literal["Off", "Alert", "Deny"] = "Alert"
    zones: List[StrictStr] = Field(default_factory=lambda: ["1", "2", "3"])
    forced_tunneling: StrictBool = False


class FirewallNetworkRule(LandingZoneConfig):
    name: StrictStr
    protocols: List[Literal["TCP", "UDP", "ICMP", "Any"]]
    source_addresses: List[StrictStr]
    destination_addresses: List[StrictStr] = Field(default_factory=list)
    destination_fqdns: List[StrictStr] = Field(default_factory=list)
    destination_ports: List[StrictStr]

    @model_validator(mode="after")
    def validate_destination(self) -> "FirewallNetworkRule":
        if not self.destination_addresses and not self.destination_fqdns:
            raise ValueError(
                f"Network rule '{self.name}' needs destination addresses or FQDNs"
            )
        return self


class ApplicationProtocol(LandingZoneConfig):
    type: Literal["Http", "Https", "Mssql"]
    port: Annotated[StrictInt, Field(ge=1, le=65535)]


class FirewallApplicationRule(LandingZoneConfig):
    name: StrictStr
    source_addresses: List[StrictStr]
    destination_fqdns: List[StrictStr] = Field(default_factory=list)
    destination_fqdn_tags: List[StrictStr] = Field(default_factory=list)
    protocols: List[ApplicationProtocol]

    @model_validator(mode="after")
    def validate_destination(self) -> "FirewallApplicationRule":
        if not self.destination_fqdns and not self.destination_fqdn_tags:
            raise ValueError(
                f"Application rule '{self.name}' needs destination FQDNs or FQDN tags"
            )
        return self


class NetworkRuleCollection(LandingZoneConfig):
    name: StrictStr
    priority: RulePriority
    action: Literal["Allow", "Deny"]
    rules: List[FirewallNetworkRule]


class ApplicationRuleCollection(LandingZoneConfig):
    name: StrictStr
    priority: RulePriority
    action: Literal["Allow", "Deny"]
    rules: List[FirewallApplicationRule]


class RuleCollectionGroup(LandingZoneConfig):
    """Firewall policy rule collection group; the map key becomes its name."""

    priority: RulePriority
    network_rule_collections: List[NetworkRuleCollection] = Field(default_factory=list)
    application_rule_collections: List[ApplicationRuleCollection] = Field(
        default_factory=list
    )

    @model_validator(mode="after")
    def validate_collection_priorities(self) -> "RuleCollectionGroup":
        priorities = [c.priority for c in self.network_rule_collections] + [
            c.priority for c in self.application_rule_collections
        ]
        if len(priorities) != len(set(priorities)):
            raise ValueError("Rule collection priorities must be unique within a group")
        return self


class FirewallPolicyConfig(LandingZoneConfig):
    """Firewall policy settings and rule tables."""

    dns_proxy_enabled: StrictBool = True
    dns_servers: List[StrictStr] = Field(default_factory=list)
    intrusion_detection_mode: Literal["Off", "Alert", "Deny"] = "Off"
    rule_collection_groups: Dict[StrictStr, RuleCollectionGroup] = Field(
        default_factory=default_firewall_rule_collection_groups,
        description="Rule collection groups keyed by name; replaces the defaults",
    )

    @model_validator(mode="after")
    def validate_group_priorities(self) -> "FirewallPolicyConfig":
        priorities = [g.priority for g in self.rule_collection_groups.values()]
        if len(priorities) != len(set(priorities)):
            raise ValueError("Rule collection group priorities must be unique")
        return self

    def rule_collection_group_list(self) -> List[dict]:
        """Rule collection groups as a list, each carrying its key as ``name``."""
        return [
            {"name": name, **group.model_dump()}
            for name, group in self.rule_collection_groups.items()
        ]


class BastionConfig(LandingZoneConfig):
    """Azure Bastion host and its subnet NSG."""

    enabled: StrictBool = True
    sku: Literal["Basic", "Standard", "Premium"] = "Standard"
    scale_units: Annotated[StrictInt, Field(ge=2, le=50)] = 2
    copy_paste_enabled: StrictBool = True
    file_copy_enabled: StrictBool = False
    tunneling_enabled: StrictBool = False
    nsg_rules: List[NsgRule] = Field(default_factory=default_bastion_nsg_rules)

    @field_validator("nsg_rules")
    @classmethod
    def check_nsg_rules(cls, v: List[NsgRule]) -> List[NsgRule]:
        return check_unique_rules(v)

    @model_validator(mode="after")
    def validate_sku_features(self) -> "BastionConfig":
        """File copy and native client tunneling need Standard or above."""
        if self.sku == "Basic" and (self.file_copy_enabled or self.tunneling_enabled):
            raise ValueError("Bastion file copy and tunneling require the Standard SKU")
        return self


class VpnGatewayConfig(LandingZoneConfig):
    enabled: StrictBool = False
    sku: StrictStr = "VpnGw1AZ"
    vpn_type: Literal["RouteBased", "PolicyBased"] = "RouteBased"
    generation: Literal["Generation1", "Generation2"] = "Generation2"
    active_active: StrictBool = False
    bgp_enabled: StrictBool = False
    bgp_asn: Annotated[StrictInt, Field(ge=1, le=4294967295)] = 65515


class PrivateDnsResolverConfig(LandingZoneConfig):
    enabled: StrictBool = False


class ConnectivityConfig(LandingZoneConfig):
    """Root configuration for the connectivity (hub) module."""

    hub_virtual_network: HubVirtualNetworkConfig = Field(
        default_factory=HubVirtualNetworkConfig
    )
    firewall: FirewallConfig = Field(default_factory=FirewallConfig)
    firewall_policy: FirewallPolicyConfig = Field(default_factory=FirewallPolicyConfig)
    bastion: BastionConfig = Field(default_factory=BastionConfig)
    vpn_gateway: VpnGatewayConfig = Field(default_factory=VpnGatewayConfig)
    private_dns_resolver: PrivateDnsResolverConfig = Field(
        default_factory=PrivateDnsResolverConfig
    )

    @model_validator(mode="after")
    def validate_feature_subnets(self) -> "ConnectivityConfig":
        """Every enabled hub feature needs its subnet."""
        subnets = self.hub_virtual_network.subnets
        required = []
        if self.firewall.enabled:
            required.append(FIREWALL_SUBNET_KEY)
            if self.firewall.forced_tunneling or self.firewall.sku_tier == "Basic":
                required.append(FIREWALL_MANAGEMENT_SUBNET_KEY)
        if self.bastion.enabled:
            required.append(BASTION_SUBNET_KEY)
        if self.vpn_gateway.enabled:
            required.append(GATEWAY_SUBNET_KEY)
        if self.private_dns_resolver.enabled:
            required.append(DNS_RESOLVER_INBOUND_SUBNET_KEY)

        missing = [key for key in required if key not in subnets]
        if missing:
            raise ValueError(
                f"Enabled features require hub subnets: {', '.join(missing)}"
            )
        if (
            self.firewall_policy.intrusion_detection_mode != "Off"
            and self.firewall.sku_tier != "Premium"
        ):
            raise ValueError("Intrusion detection requires the Premium firewall tier")
        return self
