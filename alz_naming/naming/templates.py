"""Resource name templates for each landing zone module.

Templates use ``str.format`` placeholders: ``{env}``, ``{service}``,
``{region}`` and ``{suffix}``. Fixed templates hold Azure-mandated names
(special-purpose subnets) and are returned verbatim.

Azure naming constraints:
- Storage Account: 3-24 chars, lowercase alphanumeric only, globally unique
- Key Vault: 3-24 chars, alphanumeric and hyphens, globally unique
- Windows computer name prefix: 15 chars including the host index
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from .context import NamingModule

STORAGE_MAX_LENGTH = 24
KEYVAULT_MAX_LENGTH = 24
COMPUTER_NAME_PREFIX_MAX_LENGTH = 11


class ResourcePurpose(str, Enum):
    """What a composed name is used for."""

    RESOURCE_GROUP = "resource_group"
    NETWORK_RESOURCE_GROUP = "network_resource_group"
    VIRTUAL_NETWORK = "virtual_network"
    NETWORK_SECURITY_GROUP = "network_security_group"
    ROUTE_TABLE = "route_table"
    KEY_VAULT = "key_vault"

    # AVD
    SESSION_HOST_SUBNET = "session_host_subnet"
    HOST_POOL = "host_pool"
    WORKSPACE = "workspace"
    APPLICATION_GROUP = "application_group"
    SCALING_PLAN = "scaling_plan"
    PROFILES_STORAGE = "profiles_storage"
    SESSION_HOST_PREFIX = "session_host_prefix"
    IMAGE_RESOURCE_GROUP = "image_resource_group"
    IMAGE_GALLERY = "image_gallery"
    IMAGE_DEFINITION = "image_definition"
    IMAGE_TEMPLATE = "image_template"
    IMAGE_BUILDER_IDENTITY = "image_builder_identity"

    # Connectivity
    HUB_VIRTUAL_NETWORK = "hub_virtual_network"
    FIREWALL = "firewall"
    FIREWALL_POLICY = "firewall_policy"
    FIREWALL_PUBLIC_IP = "firewall_public_ip"
    FIREWALL_MANAGEMENT_PUBLIC_IP = "firewall_management_public_ip"
    BASTION = "bastion"
    BASTION_PUBLIC_IP = "bastion_public_ip"
    BASTION_NETWORK_SECURITY_GROUP = "bastion_network_security_group"
    VPN_GATEWAY = "vpn_gateway"
    VPN_GATEWAY_PUBLIC_IP = "vpn_gateway_public_ip"
    PRIVATE_DNS_RESOLVER = "private_dns_resolver"
    GATEWAY_SUBNET = "gateway_subnet"
    FIREWALL_SUBNET = "firewall_subnet"
    FIREWALL_MANAGEMENT_SUBNET = "firewall_management_subnet"
    BASTION_SUBNET = "bastion_subnet"

    # Core
    ROOT_MANAGEMENT_GROUP = "root_management_group"
    POLICY_IDENTITY = "policy_identity"

    # Management
    LOG_ANALYTICS_WORKSPACE = "log_analytics_workspace"
    AUTOMATION_ACCOUNT = "automation_account"
    RECOVERY_SERVICES_VAULT = "recovery_services_vault"
    DATA_COLLECTION_RULE = "data_collection_rule"
    MONITORING_IDENTITY = "monitoring_identity"
    DIAGNOSTICS_STORAGE = "diagnostics_storage"

    # Spoke
    WORKLOAD_SUBNET = "workload_subnet"
    PRIVATE_ENDPOINT_SUBNET = "private_endpoint_subnet"
    HUB_PEERING = "hub_peering"
    WORKLOAD_IDENTITY = "workload_identity"
    STORAGE_ACCOUNT = "storage_account"


@dataclass(frozen=True)
class NameTemplate:
    """A single resource name template."""

    pattern: str
    max_length: Optional[int] = None
    fixed: bool = False


def templated(pattern: str, max_length: Optional[int] = None) -> NameTemplate:
    return NameTemplate(pattern=pattern, max_length=max_length)


def fixed(name: str) -> NameTemplate:
    return NameTemplate(pattern=name, fixed=True)


@dataclass(frozen=True)
class ModuleNaming:
    """Naming table and token defaults for one module."""

    module: NamingModule
    default_service: Optional[str]
    suffix_length: int
    templates: Mapping[ResourcePurpose, NameTemplate] = field(default_factory=dict)


P = ResourcePurpose

_AVD = {
    P.RESOURCE_GROUP: templated("rg-{env}-{service}-{region}-service"),
    P.NETWORK_RESOURCE_GROUP: templated("rg-{env}-{service}-{region}-network"),
    P.VIRTUAL_NETWORK: templated("vnet-{env}-{service}-{region}"),
    P.SESSION_HOST_SUBNET: templated("snet-{env}-{service}-{region}-hosts"),
    P.NETWORK_SECURITY_GROUP: templated("nsg-{env}-{service}-{region}-hosts"),
    P.HOST_POOL: templated("vdpool-{env}-{service}-{region}"),
    P.WORKSPACE: templated("vdws-{env}-{service}-{region}"),
    P.APPLICATION_GROUP: templated("vdag-{env}-{service}-{region}-desktop"),
    P.SCALING_PLAN: templated("vdscaling-{env}-{service}-{region}"),
    P.KEY_VAULT: templated("kv-{env}-{service}-{region}-{suffix}", KEYVAULT_MAX_LENGTH),
    P.PROFILES_STORAGE: templated("st{env}{service}prof{suffix}", STORAGE_MAX_LENGTH),
    P.SESSION_HOST_PREFIX: templated(
        "vm{env}{service}", COMPUTER_NAME_PREFIX_MAX_LENGTH
    ),
    P.IMAGE_RESOURCE_GROUP: templated("rg-{env}-{service}-{region}-images"),
    P.IMAGE_GALLERY: templated("gal_{env}_{service}_{region}"),
    P.IMAGE_DEFINITION: templated("img-{env}-{service}-win11"),
    P.IMAGE_TEMPLATE: templated("it-{env}-{service}-{region}-win11"),
    P.IMAGE_BUILDER_IDENTITY: templated("id-{env}-{service}-{region}-aib"),
}

_CONNECTIVITY = {
    P.RESOURCE_GROUP: templated("rg-{env}-{service}-{region}-network"),
    P.HUB_VIRTUAL_NETWORK: templated("vnet-{env}-{service}-{region}"),
    P.FIREWALL: templated("afw-{env}-{service}-{region}"),
    P.FIREWALL_POLICY: templated("afwp-{env}-{service}-{region}"),
    P.FIREWALL_PUBLIC_IP: templated("pip-{env}-{service}-{region}-afw"),
    P.FIREWALL_MANAGEMENT_PUBLIC_IP: templated("pip-{env}-{service}-{region}-afw-mgmt"),
    P.BASTION: templated("bas-{env}-{service}-{region}"),
    P.BASTION_PUBLIC_IP: templated("pip-{env}-{service}-{region}-bas"),
    P.BASTION_NETWORK_SECURITY_GROUP: templated("nsg-{env}-{service}-{region}-bas"),
    P.VPN_GATEWAY: templated("vgw-{env}-{service}-{region}"),
    P.VPN_GATEWAY_PUBLIC_IP: templated("pip-{env}-{service}-{region}-vgw"),
    P.ROUTE_TABLE: templated("rt-{env}-{service}-{region}"),
    P.PRIVATE_DNS_RESOLVER: templated("dnspr-{env}-{service}-{region}"),
    # Azure requires these exact subnet names
    P.GATEWAY_SUBNET: fixed("GatewaySubnet"),
    P.FIREWALL_SUBNET: fixed("AzureFirewallSubnet"),
    P.FIREWALL_MANAGEMENT_SUBNET: fixed("AzureFirewallManagementSubnet"),
    P.BASTION_SUBNET: fixed("AzureBastionSubnet"),
}

_CORE = {
    P.RESOURCE_GROUP: templated("rg-{env}-{service}-{region}-service"),
    P.ROOT_MANAGEMENT_GROUP: templated("mg-{env}-alz"),
    P.POLICY_IDENTITY: templated("id-{env}-{service}-{region}-policy"),
    P.KEY_VAULT: templated("kv-{env}-{service}-{region}-{suffix}", KEYVAULT_MAX_LENGTH),
}

_MANAGEMENT = {
    P.RESOURCE_GROUP: templated("rg-{env}-{service}-{region}-service"),
    P.LOG_ANALYTICS_WORKSPACE: templated("log-{env}-{service}-{region}"),
    P.AUTOMATION_ACCOUNT: templated("aa-{env}-{service}-{region}"),
    P.RECOVERY_SERVICES_VAULT: templated("rsv-{env}-{service}-{region}"),
    P.DATA_COLLECTION_RULE: templated("dcr-{env}-{service}-{region}-vminsights"),
    P.MONITORING_IDENTITY: templated("id-{env}-{service}-{region}-ama"),
    P.DIAGNOSTICS_STORAGE: templated("st{env}{service}diag{suffix}", STORAGE_MAX_LENGTH),
}

_SPOKE = {
    P.RESOURCE_GROUP: templated("rg-{env}-{service}-{region}-service"),
    P.NETWORK_RESOURCE_GROUP: templated("rg-{env}-{service}-{region}-network"),
    P.VIRTUAL_NETWORK: templated("vnet-{env}-{service}-{region}"),
    P.WORKLOAD_SUBNET: templated("snet-{env}-{service}-{region}-workload"),
    P.PRIVATE_ENDPOINT_SUBNET: templated("snet-{env}-{service}-{region}-pe"),
    P.NETWORK_SECURITY_GROUP: templated("nsg-{env}-{service}-{region}"),
    P.ROUTE_TABLE: templated("rt-{env}-{service}-{region}"),
    P.HUB_PEERING: templated("peer-{env}-{service}-{region}-to-hub"),
    P.WORKLOAD_IDENTITY: templated("id-{env}-{service}-{region}"),
    P.KEY_VAULT: templated("kv-{env}-{service}-{region}-{suffix}", KEYVAULT_MAX_LENGTH),
    P.STORAGE_ACCOUNT: templated("st{env}{service}{suffix}", STORAGE_MAX_LENGTH),
}

NAMING_TABLES: Mapping[NamingModule, ModuleNaming] = MappingProxyType(
    {
        NamingModule.AVD: ModuleNaming(
            NamingModule.AVD, "avd", 6, MappingProxyType(_AVD)
        ),
        NamingModule.CONNECTIVITY: ModuleNaming(
            NamingModule.CONNECTIVITY, "hub", 4, MappingProxyType(_CONNECTIVITY)
        ),
        NamingModule.CORE: ModuleNaming(
            NamingModule.CORE, "core", 4, MappingProxyType(_CORE)
        ),
        NamingModule.MANAGEMENT: ModuleNaming(
            NamingModule.MANAGEMENT, "mgmt", 4, MappingProxyType(_MANAGEMENT)
        ),
        # Spoke service is the workload role (identity, infra, app, ...)
        NamingModule.SPOKE: ModuleNaming(
            NamingModule.SPOKE, None, 5, MappingProxyType(_SPOKE)
        ),
    }
)


def get_module_naming(module: NamingModule) -> ModuleNaming:
    return NAMING_TABLES[NamingModule(module)]
