"""
Unit tests for configuration override resolution.

Tests per-field merge rules, strict type checking and error collection.
"""

import pytest
from pydantic import ValidationError

from alz_naming.config.models import (
    AvdConfig,
    ConnectivityConfig,
    CoreConfig,
    HostPoolConfig,
    ManagementConfig,
    MarketplaceImage,
    ScalingPlanConfig,
    SessionHostsConfig,
    SpokeConfig,
    default_config,
)
from alz_naming.config.resolver import (
    ConfigResolver,
    FieldKind,
    classify_field,
    field_type_at,
    resolve,
    resolve_module,
)
from alz_naming.exceptions import ConfigValidationError
from alz_naming.naming.context import NamingModule

ALL_DEFAULTS = [AvdConfig, ConnectivityConfig, CoreConfig, ManagementConfig, SpokeConfig]

CUSTOM_SCHEDULE = {
    "days_of_week": ["Monday", "Tuesday", "Wednesday"],
    "ramp_up_start_time": "06:00",
    "peak_start_time": "08:00",
    "ramp_down_start_time": "17:00",
    "off_peak_start_time": "19:00",
}


class TestClassifyField:
    """Test field kind classification."""

    @pytest.mark.parametrize(
        "model,field,kind",
        [
            (HostPoolConfig, "maximum_sessions_allowed", FieldKind.SCALAR),
            (HostPoolConfig, "type", FieldKind.SCALAR),
            (ScalingPlanConfig, "schedules", FieldKind.KEYED_MAP),
            (AvdConfig, "host_pool", FieldKind.OBJECT),
            (AvdConfig, "scaling_plan", FieldKind.OBJECT),
            (SessionHostsConfig, "zones", FieldKind.LIST),
            (SessionHostsConfig, "image", FieldKind.REPLACED_OBJECT),
            (CoreConfig, "management_groups", FieldKind.KEYED_MAP),
        ],
    )
    def test_kinds(self, model, field, kind):
        assert classify_field(model.model_fields[field])[0] is kind

    def test_object_returns_nested_model(self):
        kind, nested = classify_field(AvdConfig.model_fields["host_pool"])

        assert kind is FieldKind.OBJECT
        assert nested is HostPoolConfig

    def test_optional_scalar(self):
        """Test Optional[str] is still a scalar."""
        from alz_naming.config.models import RootManagementGroupConfig

        kind, _ = classify_field(RootManagementGroupConfig.model_fields["parent_id"])
        assert kind is FieldKind.SCALAR


class TestFieldTypeAt:
    """Test locating the scalar type behind an override path."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            (["host_pool", "maximum_sessions_allowed"], int),
            (["fslogix", "enabled"], bool),
            (["host_pool", "friendly_name"], str),
            (["session_hosts", "image", "version"], str),
            (["scaling_plan", "schedules", "weekdays", "ramp_down_wait_time_minutes"], int),
        ],
    )
    def test_scalar_paths(self, path, expected):
        assert field_type_at(AvdConfig, path) is expected

    @pytest.mark.parametrize(
        "path",
        [
            ["bogus"],
            ["host_pool"],
            ["session_hosts", "zones"],
            ["host_pool", "maximum_sessions_allowed", "extra"],
        ],
    )
    def test_unknown_or_non_scalar(self, path):
        assert field_type_at(AvdConfig, path) is None


class TestIdentityResolution:
    """Resolving with no or empty overrides yields the defaults."""

    @pytest.mark.parametrize("model", ALL_DEFAULTS)
    def test_null_overrides(self, model):
        defaults = model()

        assert resolve(defaults, None) == defaults

    @pytest.mark.parametrize("model", ALL_DEFAULTS)
    def test_empty_overrides(self, model):
        defaults = model()

        result = resolve(defaults, {})

        assert result.model_dump() == defaults.model_dump()

    def test_null_overrides_returns_copy(self, avd_defaults):
        result = resolve(avd_defaults, None)

        assert result is not avd_defaults
        assert result.host_pool is not avd_defaults.host_pool

    def test_defaults_not_modified(self, avd_defaults):
        before = avd_defaults.model_dump()

        resolve(avd_defaults, {"host_pool": {"maximum_sessions_allowed": 4}})

        assert avd_defaults.model_dump() == before


class TestMergeRules:
    """Test the merge rule for each field kind."""

    def test_nested_object_merged_field_by_field(self, avd_defaults):
        """Test a partial host_pool keeps every other host_pool default."""
        result = resolve(avd_defaults, {"host_pool": {"maximum_sessions_allowed": 10}})

        assert result.host_pool.maximum_sessions_allowed == 10
        assert result.host_pool.type == "Pooled"
        assert result.host_pool.load_balancer_type == "BreadthFirst"
        assert result.host_pool.custom_rdp_properties == (
            avd_defaults.host_pool.custom_rdp_properties
        )
        assert result.scaling_plan.model_dump() == avd_defaults.scaling_plan.model_dump()

    def test_keyed_map_replaced(self):
        """Test supplying schedules replaces the whole default map."""
        defaults = ScalingPlanConfig()
        assert set(defaults.schedules) == {"weekdays", "weekends"}

        result = resolve(defaults, {"schedules": {"custom": CUSTOM_SCHEDULE}})

        assert list(result.schedules) == ["custom"]
        custom = result.schedules["custom"]
        assert custom.days_of_week == ["Monday", "Tuesday", "Wednesday"]
        # fields missing from the entry take the schedule model's defaults
        assert custom.ramp_down_wait_time_minutes == 45

    def test_keyed_map_replaced_inside_module(self, avd_defaults):
        result = resolve(
            avd_defaults,
            {"scaling_plan": {"schedules": {"custom": CUSTOM_SCHEDULE}}},
        )

        assert list(result.scaling_plan.schedules) == ["custom"]
        assert result.scaling_plan.time_zone == "GMT Standard Time"

    def test_keyed_map_entries_not_merged(self, avd_defaults):
        """Test a partial entry for an existing key does not inherit that entry."""
        result = resolve(
            avd_defaults,
            {
                "scaling_plan": {
                    "schedules": {
                        "weekends": {"days_of_week": ["Saturday", "Sunday"]},
                    }
                }
            },
        )

        weekends = result.scaling_plan.schedules["weekends"]
        # the default weekends entry starts ramp up at 09:00; the model default is 07:00
        assert weekends.ramp_up_start_time == "07:00"
        assert "weekdays" not in result.scaling_plan.schedules

    def test_list_replaced(self, avd_defaults):
        result = resolve(avd_defaults, {"session_hosts": {"zones": ["1"]}})

        assert result.session_hosts.zones == ["1"]

    def test_empty_list_replaces(self, avd_defaults):
        result = resolve(avd_defaults, {"network": {"nsg_rules": []}})

        assert result.network.nsg_rules == []

    def test_scalar_replaced(self, avd_defaults):
        result = resolve(avd_defaults, {"fslogix": {"share_name": "fslogix"}})

        assert result.fslogix.share_name == "fslogix"
        assert result.fslogix.share_quota_gb == 100

    def test_null_object_uses_defaults(self, avd_defaults):
        """Test an explicit null for a nested object keeps the default sub-tree."""
        result = resolve(avd_defaults, {"host_pool": None, "fslogix": {"share_quota_gb": 200}})

        assert result.host_pool.model_dump() == avd_defaults.host_pool.model_dump()
        assert result.fslogix.share_quota_gb == 200

    def test_null_replaced_object_uses_defaults(self):
        """Test an explicit null for a replace-marked object keeps the default."""
        config = resolve_module(
            "avd",
            {"session_hosts": {"image": None}, "image_builder": {"source_image": None}},
        )

        assert config.session_hosts.image.model_dump() == MarketplaceImage().model_dump()
        assert config.image_builder.source_image.model_dump() == MarketplaceImage().model_dump()

    def test_replaced_object_not_merged(self):
        """Test replace-marked objects fall back to model defaults, not the current value."""
        defaults = SessionHostsConfig(image=MarketplaceImage(sku="win10-22h2-avd"))

        result = resolve(defaults, {"image": {"offer": "windows-11"}})

        assert result.image.offer == "windows-11"
        assert result.image.sku == MarketplaceImage().sku

    def test_null_replaced_object_keeps_current_default(self):
        defaults = SessionHostsConfig(image=MarketplaceImage(sku="win10-22h2-avd"))

        result = resolve(defaults, {"image": None})

        assert result.image.sku == "win10-22h2-avd"

    def test_subnet_map_replaced(self):
        defaults = SpokeConfig()

        result = resolve(
            defaults,
            {"virtual_network": {"subnets": {"app": {"address_prefix": "10.1.0.0/26"}}}},
        )

        assert list(result.virtual_network.subnets) == ["app"]
        assert result.virtual_network.address_space == defaults.virtual_network.address_space

    def test_result_is_frozen(self, avd_defaults):
        result = resolve(avd_defaults, {"host_pool": {"maximum_sessions_allowed": 10}})

        with pytest.raises(ValidationError):
            result.host_pool.maximum_sessions_allowed = 11


class TestValidationErrors:
    """Test rejected overrides."""

    def test_string_for_number(self, avd_defaults):
        """Test a string where an int is declared is not coerced."""
        with pytest.raises(ConfigValidationError) as exc_info:
            resolve(avd_defaults, {"host_pool": {"maximum_sessions_allowed": "10"}})

        paths = [path for path, _ in exc_info.value.issues]
        assert "host_pool.maximum_sessions_allowed" in paths

    def test_bool_for_number(self, avd_defaults):
        with pytest.raises(ConfigValidationError):
            resolve(avd_defaults, {"fslogix": {"share_quota_gb": True}})

    def test_number_for_bool(self, avd_defaults):
        with pytest.raises(ConfigValidationError):
            resolve(avd_defaults, {"fslogix": {"enabled": 1}})

    def test_scalar_for_object(self, avd_defaults):
        with pytest.raises(ConfigValidationError) as exc_info:
            resolve(avd_defaults, {"host_pool": 10})

        assert exc_info.value.issues[0][0] == "host_pool"
        assert "expected an object" in exc_info.value.issues[0][1]

    def test_unknown_top_level_key(self, avd_defaults):
        with pytest.raises(ConfigValidationError) as exc_info:
            resolve(avd_defaults, {"hostpool": {}})

        assert exc_info.value.issues == [("hostpool", "unknown field")]

    def test_unknown_nested_key(self, avd_defaults):
        with pytest.raises(ConfigValidationError) as exc_info:
            resolve(avd_defaults, {"host_pool": {"max_sessions": 5}})

        assert exc_info.value.issues == [("host_pool.max_sessions", "unknown field")]

    def test_non_mapping_overrides(self, avd_defaults):
        with pytest.raises(ConfigValidationError, match="Invalid configuration"):
            resolve(avd_defaults, ["host_pool"])  # type: ignore[arg-type]

    def test_all_issues_reported_together(self, avd_defaults):
        """Test every problem is collected before raising."""
        with pytest.raises(ConfigValidationError) as exc_info:
            resolve(
                avd_defaults,
                {
                    "bogus": 1,
                    "host_pool": {"maximum_sessions_allowed": "ten"},
                    "fslogix": {"share_quota_gb": "big"},
                },
            )

        paths = {path for path, _ in exc_info.value.issues}
        assert "bogus" in paths
        assert "host_pool.maximum_sessions_allowed" in paths
        assert "fslogix.share_quota_gb" in paths

    def test_cross_field_rule(self, avd_defaults):
        """Test schema validators run on the merged tree."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration") as exc_info:
            resolve(avd_defaults, {"host_pool": {"type": "Personal"}})

        assert any("Persistent" in message for _, message in exc_info.value.issues)

    def test_error_payload(self, avd_defaults):
        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigResolver(section="avd").resolve(avd_defaults, {"nope": 1})

        data = exc_info.value.to_dict()
        assert data["error_code"] == "INVALID_CONFIG"
        assert data["context"]["config_section"] == "avd"
        assert data["issues"] == [{"path": "nope", "message": "unknown field"}]


class TestResolveModule:
    @pytest.mark.parametrize("module", list(NamingModule))
    def test_defaults_per_module(self, module):
        assert resolve_module(module).model_dump() == default_config(module).model_dump()

    def test_overrides(self):
        config = resolve_module("connectivity", {"firewall": {"sku_tier": "Premium"}})

        assert isinstance(config, ConnectivityConfig)
        assert config.firewall.sku_tier == "Premium"
        assert config.bastion.enabled is True

    def test_section_in_error(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            resolve_module(NamingModule.MANAGEMENT, {"log_analytics": {"sku": "Free"}})

        assert exc_info.value.context["config_section"] == "management"
