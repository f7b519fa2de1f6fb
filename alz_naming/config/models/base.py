"""
Shared building blocks for landing zone configuration models.

Scalar fields use pydantic's strict types so an override supplying a string
where a number is declared is rejected instead of coerced.
"""

import ipaddress
from typing import Annotated, Iterable, List, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

# json_schema_extra marker: nested object is replaced wholesale instead of merged
REPLACE = {"merge": "replace"}

Percent = Annotated[StrictInt, Field(ge=0, le=100)]
ClockTime = Annotated[StrictStr, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]
DayOfWeek = Literal[
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
]


class LandingZoneConfig(BaseModel):
    """Base for all configuration trees: frozen, closed, defaults validated."""

    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)


class NsgRule(LandingZoneConfig):
    """A single network security group rule."""

    name: StrictStr
    priority: Annotated[StrictInt, Field(ge=100, le=4096)]
    direction: Literal["Inbound", "Outbound"]
    access: Literal["Allow", "Deny"]
    protocol: Literal["Tcp", "Udp", "Icmp", "Esp", "Ah", "*"]
    source_port_range: StrictStr = "*"
    destination_port_ranges: List[StrictStr]
    source_address_prefix: StrictStr
    destination_address_prefix: StrictStr
    description: StrictStr = ""


class SubnetConfig(LandingZoneConfig):
    """Subnet definition inside a virtual network."""

    address_prefix: StrictStr
    service_endpoints: List[StrictStr] = Field(default_factory=list)
    private_endpoint_network_policies: Literal["Enabled", "Disabled"] = "Enabled"
    delegation: StrictStr = ""

    @field_validator("address_prefix")
    @classmethod
    def validate_address_prefix(cls, v: str) -> str:
        """Validate the prefix is a CIDR network."""
        try:
            ipaddress.ip_network(v)
        except ValueError as e:
            raise ValueError(f"'{v}' is not a valid CIDR prefix") from e
        return v


def validate_address_space(address_space: List[str]) -> List[str]:
    if not address_space:
        raise ValueError("Address space must contain at least one prefix")
    for prefix in address_space:
        try:
            ipaddress.ip_network(prefix)
        except ValueError as e:
            raise ValueError(f"'{prefix}' is not a valid CIDR prefix") from e
    return address_space


def check_subnets_in_address_space(
    address_space: Iterable[str], subnets: Mapping[str, SubnetConfig]
) -> None:
    """Raise ValueError if a subnet falls outside every address space prefix."""
    networks = [ipaddress.ip_network(prefix) for prefix in address_space]
    for key, subnet in subnets.items():
        subnet_net = ipaddress.ip_network(subnet.address_prefix)
        if not any(
            subnet_net.version == net.version and subnet_net.subnet_of(net)
            for net in networks
        ):
            raise ValueError(
                f"Subnet '{key}' ({subnet.address_prefix}) is outside the address space"
            )


def check_unique_rules(rules: List[NsgRule]) -> List[NsgRule]:
    """Rule names must be unique, and priorities unique per direction."""
    names = [rule.name for rule in rules]
    if len(names) != len(set(names)):
        raise ValueError("Duplicate NSG rule names")
    seen = set()
    for rule in rules:
        key = (rule.direction, rule.priority)
        if key in seen:
            raise ValueError(
                f"Duplicate {rule.direction} NSG rule priority {rule.priority}"
            )
        seen.add(key)
    return rules
