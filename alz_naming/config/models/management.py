"""Configuration models for the management (monitoring and backup) module."""

from typing import Annotated, List, Literal

from pydantic import Field, StrictBool, StrictInt, StrictStr, model_validator

from .base import ClockTime, DayOfWeek, LandingZoneConfig


class LogAnalyticsConfig(LandingZoneConfig):
    sku: Literal["PerGB2018", "CapacityReservation"] = "PerGB2018"
    retention_in_days: Annotated[StrictInt, Field(ge=30, le=730)] = 30
    daily_quota_gb: Annotated[StrictInt, Field(ge=-1)] = Field(
        default=-1, description="Daily ingestion cap in GB; -1 means unlimited"
    )
    internet_ingestion_enabled: StrictBool = True
    internet_query_enabled: StrictBool = True


class AutomationAccountConfig(LandingZoneConfig):
    enabled: StrictBool = True
    sku: Literal["Basic", "Free"] = "Basic"
    public_network_access_enabled: StrictBool = True


class RecoveryServicesVaultConfig(LandingZoneConfig):
    sku: Literal["Standard", "RS0"] = "Standard"
    storage_mode_type: Literal["GeoRedundant", "LocallyRedundant", "ZoneRedundant"] = (
        "GeoRedundant"
    )
    cross_region_restore_enabled: StrictBool = True
    soft_delete_enabled: StrictBool = True
    immutability: Literal["Disabled", "Unlocked", "Locked"] = "Disabled"

    @model_validator(mode="after")
    def validate_cross_region_restore(self) -> "RecoveryServicesVaultConfig":
        if self.cross_region_restore_enabled and self.storage_mode_type != "GeoRedundant":
            raise ValueError("Cross region restore requires GeoRedundant storage")
        return self


class BackupPolicyConfig(LandingZoneConfig):
    """Default VM backup policy."""

    frequency: Literal["Daily", "Weekly"] = "Daily"
    time: ClockTime = "23:00"
    timezone: StrictStr = "UTC"
    instant_restore_retention_days: Annotated[StrictInt, Field(ge=1, le=5)] = 2
    retention_daily_count: Annotated[StrictInt, Field(ge=7, le=9999)] = 30
    retention_weekly_count: Annotated[StrictInt, Field(ge=0, le=5163)] = 12
    retention_weekly_weekdays: List[DayOfWeek] = Field(
        default_factory=lambda: ["Sunday"]
    )
    retention_monthly_count: Annotated[StrictInt, Field(ge=0, le=1188)] = 12


class DataCollectionConfig(LandingZoneConfig):
    vm_insights_enabled: StrictBool = True
    change_tracking_enabled: StrictBool = True
    defender_sql_enabled: StrictBool = False


class DiagnosticsStorageConfig(LandingZoneConfig):
    account_tier: Literal["Standard", "Premium"] = "Standard"
    account_replication_type: Literal["LRS", "ZRS", "GRS", "RAGRS", "GZRS", "RAGZRS"] = (
        "GRS"
    )
    min_tls_version: Literal["TLS1_2"] = "TLS1_2"
    retention_days: Annotated[StrictInt, Field(ge=1, le=365)] = 90


class ManagementConfig(LandingZoneConfig):
    """Root configuration for the management module."""

    log_analytics: LogAnalyticsConfig = Field(default_factory=LogAnalyticsConfig)
    automation_account: AutomationAccountConfig = Field(
        default_factory=AutomationAccountConfig
    )
    recovery_services_vault: RecoveryServicesVaultConfig = Field(
        default_factory=RecoveryServicesVaultConfig
    )
    backup_policy: BackupPolicyConfig = Field(default_factory=BackupPolicyConfig)
    data_collection: DataCollectionConfig = Field(default_factory=DataCollectionConfig)
    diagnostics_storage: DiagnosticsStorageConfig = Field(
        default_factory=DiagnosticsStorageConfig
    )
    security_contact_email: StrictStr = ""
