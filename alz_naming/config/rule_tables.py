"""Default rule tables for network security groups and firewall policies.

These are fixed baselines (Microsoft-recommended AVD, Azure Bastion and
platform egress rules) that downstream resource declarations consume as-is.
They are plain data; the config models validate them into typed rules and
callers get fresh copies through the ``default_*`` helpers.

Azure Bastion Requirements:
- Specific inbound and outbound rules required on AzureBastionSubnet
- Missing rules cause NetworkSecurityGroupNotCompliantForAzureBastionSubnet
"""

from copy import deepcopy
from typing import Any, Dict, List

# Custom RDP properties applied to AVD host pools
DEFAULT_CUSTOM_RDP_PROPERTIES = (
    "drivestoredirect:s:*;audiomode:i:0;videoplaybackmode:i:1;"
    "redirectclipboard:i:1;redirectprinters:i:1;devicestoredirect:s:*;"
    "redirectcomports:i:1;redirectsmartcards:i:1;usbdevicestoredirect:s:*;"
    "enablecredsspsupport:i:1;redirectwebauthn:i:1;use multimon:i:1;"
    "targetisaadjoined:i:1;enablerdsaadauth:i:1"
)

# Outbound rules required by AVD session hosts
AVD_SESSION_HOST_NSG_RULES: List[Dict[str, Any]] = [
    {
        "name": "AllowAvdServiceOutbound",
        "priority": 100,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["443"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "WindowsVirtualDesktop",
        "description": "Allow AVD control plane",
    },
    {
        "name": "AllowAzureCloudOutbound",
        "priority": 110,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["443"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "AzureCloud",
        "description": "Allow HTTPS to AzureCloud",
    },
    {
        "name": "AllowAzureMonitorOutbound",
        "priority": 120,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["443"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "AzureMonitor",
        "description": "Allow agent telemetry to Azure Monitor",
    },
    {
        "name": "AllowEntraIdOutbound",
        "priority": 130,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["443"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "AzureActiveDirectory",
        "description": "Allow Entra ID authentication",
    },
    {
        "name": "AllowKmsOutbound",
        "priority": 140,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["1688"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "Internet",
        "description": "Allow Windows activation",
    },
    {
        "name": "AllowInstanceMetadataOutbound",
        "priority": 150,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["80"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "169.254.169.254",
        "description": "Allow Azure Instance Metadata Service",
    },
    {
        "name": "AllowHostHealthOutbound",
        "priority": 160,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["80"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "168.63.129.16",
        "description": "Allow session host health monitoring",
    },
    {
        "name": "DenyRdpInternetInbound",
        "priority": 4000,
        "direction": "Inbound",
        "access": "Deny",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["3389"],
        "source_address_prefix": "Internet",
        "destination_address_prefix": "*",
        "description": "Deny direct RDP from the Internet",
    },
]

# Rules required on the AzureBastionSubnet NSG
BASTION_NSG_RULES: List[Dict[str, Any]] = [
    {
        "name": "AllowHttpsInbound",
        "priority": 120,
        "direction": "Inbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["443"],
        "source_address_prefix": "Internet",
        "destination_address_prefix": "*",
        "description": "Allow HTTPS inbound from Internet",
    },
    {
        "name": "AllowGatewayManagerInbound",
        "priority": 130,
        "direction": "Inbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["443"],
        "source_address_prefix": "GatewayManager",
        "destination_address_prefix": "*",
        "description": "Allow Gateway Manager inbound",
    },
    {
        "name": "AllowAzureLoadBalancerInbound",
        "priority": 140,
        "direction": "Inbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["443"],
        "source_address_prefix": "AzureLoadBalancer",
        "destination_address_prefix": "*",
        "description": "Allow Azure Load Balancer inbound",
    },
    {
        "name": "AllowBastionHostCommunication",
        "priority": 150,
        "direction": "Inbound",
        "access": "Allow",
        "protocol": "*",
        "source_port_range": "*",
        "destination_port_ranges": ["8080", "5701"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "VirtualNetwork",
        "description": "Allow Bastion host communication",
    },
    {
        "name": "AllowSshRdpOutbound",
        "priority": 100,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "*",
        "source_port_range": "*",
        "destination_port_ranges": ["22", "3389"],
        "source_address_prefix": "*",
        "destination_address_prefix": "VirtualNetwork",
        "description": "Allow SSH and RDP to VirtualNetwork",
    },
    {
        "name": "AllowAzureCloudOutbound",
        "priority": 110,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "Tcp",
        "source_port_range": "*",
        "destination_port_ranges": ["443"],
        "source_address_prefix": "*",
        "destination_address_prefix": "AzureCloud",
        "description": "Allow HTTPS to AzureCloud",
    },
    {
        "name": "AllowBastionCommunication",
        "priority": 120,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "*",
        "source_port_range": "*",
        "destination_port_ranges": ["8080", "5701"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "VirtualNetwork",
        "description": "Allow Bastion data plane communication",
    },
    {
        "name": "AllowGetSessionInformation",
        "priority": 130,
        "direction": "Outbound",
        "access": "Allow",
        "protocol": "*",
        "source_port_range": "*",
        "destination_port_ranges": ["80"],
        "source_address_prefix": "*",
        "destination_address_prefix": "Internet",
        "description": "Allow session and certificate validation",
    },
]

# Baseline rules for workload spoke subnets
SPOKE_NSG_RULES: List[Dict[str, Any]] = [
    {
        "name": "AllowVnetInbound",
        "priority": 100,
        "direction": "Inbound",
        "access": "Allow",
        "protocol": "*",
        "source_port_range": "*",
        "destination_port_ranges": ["*"],
        "source_address_prefix": "VirtualNetwork",
        "destination_address_prefix": "VirtualNetwork",
        "description": "Allow traffic from peered networks",
    },
    {
        "name": "AllowAzureLoadBalancerInbound",
        "priority": 110,
        "direction": "Inbound",
        "access": "Allow",
        "protocol": "*",
        "source_port_range": "*",
        "destination_port_ranges": ["*"],
        "source_address_prefix": "AzureLoadBalancer",
        "destination_address_prefix": "*",
        "description": "Allow Azure Load Balancer probes",
    },
    {
        "name": "DenyInternetInbound",
        "priority": 4096,
        "direction": "Inbound",
        "access": "Deny",
        "protocol": "*",
        "source_port_range": "*",
        "destination_port_ranges": ["*"],
        "source_address_prefix": "Internet",
        "destination_address_prefix": "*",
        "description": "Deny all inbound from the Internet",
    },
]

# Hub firewall policy rule collection groups, keyed by group name
FIREWALL_RULE_COLLECTION_GROUPS: Dict[str, Dict[str, Any]] = {
    "platform": {
        "priority": 100,
        "network_rule_collections": [
            {
                "name": "AllowPlatformNetwork",
                "priority": 100,
                "action": "Allow",
                "rules": [
                    {
                        "name": "AllowDns",
                        "protocols": ["UDP", "TCP"],
                        "source_addresses": ["*"],
                        "destination_addresses": ["*"],
                        "destination_ports": ["53"],
                    },
                    {
                        "name": "AllowNtp",
                        "protocols": ["UDP"],
                        "source_addresses": ["*"],
                        "destination_addresses": ["*"],
                        "destination_ports": ["123"],
                    },
                    {
                        "name": "AllowKms",
                        "protocols": ["TCP"],
                        "source_addresses": ["*"],
                        "destination_addresses": ["20.118.99.224", "40.83.235.53"],
                        "destination_ports": ["1688"],
                    },
                ],
            }
        ],
        "application_rule_collections": [
            {
                "name": "AllowPlatformWeb",
                "priority": 200,
                "action": "Allow",
                "rules": [
                    {
                        "name": "AllowWindowsUpdate",
                        "source_addresses": ["*"],
                        "destination_fqdn_tags": ["WindowsUpdate"],
                        "protocols": [
                            {"type": "Https", "port": 443},
                            {"type": "Http", "port": 80},
                        ],
                    },
                    {
                        "name": "AllowAzureBackup",
                        "source_addresses": ["*"],
                        "destination_fqdn_tags": ["AzureBackup"],
                        "protocols": [{"type": "Https", "port": 443}],
                    },
                ],
            }
        ],
    },
    "avd": {
        "priority": 200,
        "network_rule_collections": [
            {
                "name": "AllowAvdNetwork",
                "priority": 100,
                "action": "Allow",
                "rules": [
                    {
                        "name": "AllowAvdService",
                        "protocols": ["TCP"],
                        "source_addresses": ["*"],
                        "destination_addresses": ["WindowsVirtualDesktop"],
                        "destination_ports": ["443"],
                    },
                    {
                        "name": "AllowAzureMonitor",
                        "protocols": ["TCP"],
                        "source_addresses": ["*"],
                        "destination_addresses": ["AzureMonitor"],
                        "destination_ports": ["443"],
                    },
                    {
                        "name": "AllowTurnRelay",
                        "protocols": ["UDP"],
                        "source_addresses": ["*"],
                        "destination_addresses": ["20.202.0.0/16"],
                        "destination_ports": ["3478"],
                    },
                ],
            }
        ],
        "application_rule_collections": [
            {
                "name": "AllowAvdWeb",
                "priority": 200,
                "action": "Allow",
                "rules": [
                    {
                        "name": "AllowAvdFqdnTag",
                        "source_addresses": ["*"],
                        "destination_fqdn_tags": ["WindowsVirtualDesktop"],
                        "protocols": [{"type": "Https", "port": 443}],
                    },
                    {
                        "name": "AllowAvdRequiredUrls",
                        "source_addresses": ["*"],
                        "destination_fqdns": [
                            "login.microsoftonline.com",
                            "*.wvd.microsoft.com",
                            "*.prod.warm.ingest.monitor.core.windows.net",
                            "catalogartifact.azureedge.net",
                            "gcs.prod.monitoring.core.windows.net",
                            "mrsglobalsteus2prod.blob.core.windows.net",
                            "wvdportalstorageblob.blob.core.windows.net",
                            "*.servicebus.windows.net",
                            "oneocsp.microsoft.com",
                            "www.microsoft.com",
                        ],
                        "protocols": [{"type": "Https", "port": 443}],
                    },
                ],
            }
        ],
    },
}


def default_avd_nsg_rules() -> List[Dict[str, Any]]:
    return deepcopy(AVD_SESSION_HOST_NSG_RULES)


def default_bastion_nsg_rules() -> List[Dict[str, Any]]:
    return deepcopy(BASTION_NSG_RULES)


def default_spoke_nsg_rules() -> List[Dict[str, Any]]:
    return deepcopy(SPOKE_NSG_RULES)


def default_firewall_rule_collection_groups() -> Dict[str, Dict[str, Any]]:
    return deepcopy(FIREWALL_RULE_COLLECTION_GROUPS)
