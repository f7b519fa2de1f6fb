"""
Configuration models for the Azure Virtual Desktop module.

Covers the host pool, workspace, desktop application group, scaling plan,
FSLogix profile storage, session hosts and the Azure Image Builder pipeline.
"""

from typing import Annotated, Any, Dict, List, Literal

from pydantic import (
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from ..rule_tables import DEFAULT_CUSTOM_RDP_PROPERTIES, default_avd_nsg_rules
from .base import (
    REPLACE,
    ClockTime,
    DayOfWeek,
    LandingZoneConfig,
    NsgRule,
    Percent,
    SubnetConfig,
    check_subnets_in_address_space,
    check_unique_rules,
    validate_address_space,
)

LoadBalancingAlgorithm = Literal["BreadthFirst", "DepthFirst"]


class HostPoolConfig(LandingZoneConfig):
    """Host pool settings."""

    type: Literal["Pooled", "Personal"] = Field(
        default="Pooled",
        description="Pooled (shared) or Personal (assigned) desktops",
    )
    load_balancer_type: Literal["BreadthFirst", "DepthFirst", "Persistent"] = Field(
        default="BreadthFirst",
        description="Session distribution; Persistent is required for Personal pools",
    )
    maximum_sessions_allowed: Annotated[StrictInt, Field(ge=1, le=999999)] = Field(
        default=16,
        description="Maximum concurrent sessions per session host",
    )
    preferred_app_group_type: Literal["Desktop", "RailApplications", "None"] = "Desktop"
    start_vm_on_connect: StrictBool = True
    validate_environment: StrictBool = False
    custom_rdp_properties: StrictStr = Field(
        default=DEFAULT_CUSTOM_RDP_PROPERTIES,
        description="RDP property string applied to every connection",
    )
    friendly_name: StrictStr = "AVD Host Pool"
    registration_token_validity_hours: Annotated[StrictInt, Field(ge=1, le=720)] = 48

    @model_validator(mode="after")
    def validate_load_balancer(self) -> "HostPoolConfig":
        """Personal pools use persistent assignment; pooled ones never do."""
        if self.type == "Personal" and self.load_balancer_type != "Persistent":
            raise ValueError("Personal host pools require load_balancer_type 'Persistent'")
        if self.type == "Pooled" and self.load_balancer_type == "Persistent":
            raise ValueError("Pooled host pools cannot use load_balancer_type 'Persistent'")
        return self


class WorkspaceConfig(LandingZoneConfig):
    """AVD workspace settings."""

    friendly_name: StrictStr = "AVD Workspace"
    description: StrictStr = ""
    public_network_access_enabled: StrictBool = True


class ApplicationGroupConfig(LandingZoneConfig):
    """Desktop application group settings."""

    type: Literal["Desktop", "RemoteApp"] = "Desktop"
    friendly_name: StrictStr = "Desktop"
    default_desktop_display_name: StrictStr = "SessionDesktop"
    user_group_object_ids: List[StrictStr] = Field(
        default_factory=list,
        description="Entra ID groups granted Desktop Virtualization User",
    )


class ScalingSchedule(LandingZoneConfig):
    """One scaling plan schedule; the map key becomes its name."""

    days_of_week: List[DayOfWeek]
    ramp_up_start_time: ClockTime = "07:00"
    ramp_up_load_balancing_algorithm: LoadBalancingAlgorithm = "BreadthFirst"
    ramp_up_minimum_hosts_percent: Percent = 20
    ramp_up_capacity_threshold_percent: Percent = 60
    peak_start_time: ClockTime = "09:00"
    peak_load_balancing_algorithm: LoadBalancingAlgorithm = "DepthFirst"
    ramp_down_start_time: ClockTime = "18:00"
    ramp_down_load_balancing_algorithm: LoadBalancingAlgorithm = "DepthFirst"
    ramp_down_minimum_hosts_percent: Percent = 10
    ramp_down_capacity_threshold_percent: Percent = 90
    ramp_down_force_logoff_users: StrictBool = False
    ramp_down_wait_time_minutes: Annotated[StrictInt, Field(ge=0)] = 45
    ramp_down_notification_message: StrictStr = (
        "You will be logged off in 45 min. Make sure to save your work."
    )
    ramp_down_stop_hosts_when: Literal["ZeroSessions", "ZeroActiveSessions"] = (
        "ZeroSessions"
    )
    off_peak_start_time: ClockTime = "20:00"
    off_peak_load_balancing_algorithm: LoadBalancingAlgorithm = "DepthFirst"

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("A schedule needs at least one day")
        if len(v) != len(set(v)):
            raise ValueError("Duplicate days in schedule")
        return v

    @model_validator(mode="after")
    def validate_phase_order(self) -> "ScalingSchedule":
        """Ramp-up, peak, ramp-down and off-peak must start in that order."""
        times = [
            self.ramp_up_start_time,
            self.peak_start_time,
            self.ramp_down_start_time,
            self.off_peak_start_time,
        ]
        if times != sorted(times) or len(set(times)) != len(times):
            raise ValueError(
                "Schedule phases must start in order: ramp up < peak < ramp down < off peak"
            )
        return self


def default_schedules() -> Dict[str, Dict[str, Any]]:
    return {
        "weekdays": {
            "days_of_week": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
            "ramp_up_start_time": "07:00",
            "ramp_up_load_balancing_algorithm": "BreadthFirst",
            "ramp_up_minimum_hosts_percent": 20,
            "ramp_up_capacity_threshold_percent": 60,
            "peak_start_time": "09:00",
            "peak_load_balancing_algorithm": "DepthFirst",
            "ramp_down_start_time": "18:00",
            "ramp_down_load_balancing_algorithm": "DepthFirst",
            "ramp_down_minimum_hosts_percent": 10,
            "ramp_down_capacity_threshold_percent": 90,
            "ramp_down_force_logoff_users": False,
            "ramp_down_wait_time_minutes": 45,
            "ramp_down_notification_message": (
                "You will be logged off in 45 min. Make sure to save your work."
            ),
            "ramp_down_stop_hosts_when": "ZeroSessions",
            "off_peak_start_time": "20:00",
            "off_peak_load_balancing_algorithm": "DepthFirst",
        },
        "weekends": {
            "days_of_week": ["Saturday", "Sunday"],
            "ramp_up_start_time": "09:00",
            "ramp_up_load_balancing_algorithm": "BreadthFirst",
            "ramp_up_minimum_hosts_percent": 10,
            "ramp_up_capacity_threshold_percent": 90,
            "peak_start_time": "10:00",
            "peak_load_balancing_algorithm": "DepthFirst",
            "ramp_down_start_time": "16:00",
            "ramp_down_load_balancing_algorithm": "DepthFirst",
            "ramp_down_minimum_hosts_percent": 0,
            "ramp_down_capacity_threshold_percent": 90,
            "ramp_down_force_logoff_users": False,
            "ramp_down_wait_time_minutes": 30,
            "ramp_down_notification_message": (
                "You will be logged off in 30 min. Make sure to save your work."
            ),
            "ramp_down_stop_hosts_when": "ZeroActiveSessions",
            "off_peak_start_time": "18:00",
            "off_peak_load_balancing_algorithm": "DepthFirst",
        },
    }


class ScalingPlanConfig(LandingZoneConfig):
    """Autoscale plan attached to pooled host pools."""

    enabled: StrictBool = True
    time_zone: StrictStr = "GMT Standard Time"
    exclusion_tag: StrictStr = "excludeFromScaling"
    friendly_name: StrictStr = "AVD Scaling Plan"
    schedules: Dict[StrictStr, ScalingSchedule] = Field(
        default_factory=default_schedules,
        description="Named schedules; supplying this map replaces the defaults",
    )

    @model_validator(mode="after")
    def validate_schedules(self) -> "ScalingPlanConfig":
        """An enabled plan needs schedules, and no day may be scheduled twice."""
        if self.enabled and not self.schedules:
            raise ValueError("An enabled scaling plan requires at least one schedule")
        seen: Dict[str, str] = {}
        for name, schedule in self.schedules.items():
            for day in schedule.days_of_week:
                if day in seen:
                    raise ValueError(
                        f"{day} is scheduled by both '{seen[day]}' and '{name}'"
                    )
                seen[day] = name
        return self

    def schedule_list(self) -> List[Dict[str, Any]]:
        """Schedules as a list, each carrying its map key as ``name``."""
        return [
            {"name": name, **schedule.model_dump()}
            for name, schedule in self.schedules.items()
        ]


class FslogixConfig(LandingZoneConfig):
    """FSLogix profile container storage."""

    enabled: StrictBool = True
    share_name: StrictStr = "profiles"
    share_quota_gb: Annotated[StrictInt, Field(ge=100, le=102400)] = 100
    storage_account_tier: Literal["Standard", "Premium"] = "Premium"
    storage_account_kind: Literal["StorageV2", "FileStorage"] = "FileStorage"
    storage_replication_type: Literal["LRS", "ZRS", "GRS", "GZRS"] = "ZRS"
    directory_type: Literal["AADKERB", "AADDS", "AD", "None"] = "AADKERB"

    @model_validator(mode="after")
    def validate_storage_kind(self) -> "FslogixConfig":
        """Premium file shares only exist on FileStorage accounts."""
        if self.storage_account_tier == "Premium":
            if self.storage_account_kind != "FileStorage":
                raise ValueError("Premium FSLogix storage requires kind 'FileStorage'")
            if self.storage_replication_type not in ("LRS", "ZRS"):
                raise ValueError("Premium FSLogix storage supports only LRS or ZRS")
        return self


class MarketplaceImage(LandingZoneConfig):
    """Marketplace image reference."""

    publisher: StrictStr = "MicrosoftWindowsDesktop"
    offer: StrictStr = "office-365"
    sku: StrictStr = "win11-24h2-avd-m365"
    version: StrictStr = "latest"


class SessionHostsConfig(LandingZoneConfig):
    """Session host virtual machines."""

    count: Annotated[StrictInt, Field(ge=0, le=400)] = 2
    vm_size: StrictStr = "Standard_D4ads_v5"
    os_disk_type: Literal["Premium_LRS", "StandardSSD_LRS", "Standard_LRS"] = (
        "Premium_LRS"
    )
    entra_join: StrictBool = True
    intune_enrollment: StrictBool = False
    zones: List[StrictStr] = Field(default_factory=lambda: ["1", "2", "3"])
    use_custom_image: StrictBool = False
    image: MarketplaceImage = Field(
        default_factory=MarketplaceImage, json_schema_extra=REPLACE
    )


class ImageDefinitionConfig(LandingZoneConfig):
    """Compute gallery image definition identity."""

    publisher: StrictStr = "alz"
    offer: StrictStr = "avd"
    sku: StrictStr = "win11-m365"
    hyper_v_generation: Literal["V1", "V2"] = "V2"


class ImageBuilderConfig(LandingZoneConfig):
    """Azure Image Builder pipeline producing the custom session host image."""

    enabled: StrictBool = False
    build_timeout_minutes: Annotated[StrictInt, Field(ge=0, le=960)] = 120
    vm_size: StrictStr = "Standard_D4s_v5"
    os_disk_size_gb: Annotated[StrictInt, Field(ge=30, le=4095)] = 127
    source_image: MarketplaceImage = Field(
        default_factory=MarketplaceImage, json_schema_extra=REPLACE
    )
    image_definition: ImageDefinitionConfig = Field(default_factory=ImageDefinitionConfig)
    customization_scripts: List[StrictStr] = Field(default_factory=list)
    replication_regions: List[StrictStr] = Field(default_factory=list)
    run_windows_update: StrictBool = True


class AvdNetworkConfig(LandingZoneConfig):
    """Session host network."""

    address_space: List[StrictStr] = Field(default_factory=lambda: ["10.20.0.0/22"])
    session_host_subnet: SubnetConfig = Field(
        default_factory=lambda: SubnetConfig(address_prefix="10.20.0.0/24")
    )
    dns_servers: List[StrictStr] = Field(default_factory=list)
    nsg_rules: List[NsgRule] = Field(default_factory=default_avd_nsg_rules)

    @field_validator("address_space")
    @classmethod
    def check_address_space(cls, v: List[str]) -> List[str]:
        return validate_address_space(v)

    @field_validator("nsg_rules")
    @classmethod
    def check_nsg_rules(cls, v: List[NsgRule]) -> List[NsgRule]:
        return check_unique_rules(v)

    @model_validator(mode="after")
    def validate_subnet_prefix(self) -> "AvdNetworkConfig":
        check_subnets_in_address_space(
            self.address_space,
            {"session_hosts": self.session_host_subnet},
        )
        return self


class AvdConfig(LandingZoneConfig):
    """Root configuration for the AVD module."""

    host_pool: HostPoolConfig = Field(default_factory=HostPoolConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    application_group: ApplicationGroupConfig = Field(
        default_factory=ApplicationGroupConfig
    )
    scaling_plan: ScalingPlanConfig = Field(default_factory=ScalingPlanConfig)
    fslogix: FslogixConfig = Field(default_factory=FslogixConfig)
    session_hosts: SessionHostsConfig = Field(default_factory=SessionHostsConfig)
    image_builder: ImageBuilderConfig = Field(default_factory=ImageBuilderConfig)
    network: AvdNetworkConfig = Field(default_factory=AvdNetworkConfig)

    @model_validator(mode="after")
    def validate_scaling_plan_pool_type(self) -> "AvdConfig":
        """Scaling plans in this module only drive pooled host pools."""
        if self.scaling_plan.enabled and self.host_pool.type != "Pooled":
            raise ValueError("Scaling plan requires a Pooled host pool; disable it first")
        if self.session_hosts.use_custom_image and not self.image_builder.enabled:
            raise ValueError("use_custom_image requires image_builder.enabled")
        return self
