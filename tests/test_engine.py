"""Tests for deployment resolution."""

import pytest

from alz_naming import resolve_deployment
from alz_naming.config.models import AvdConfig, SpokeConfig
from alz_naming.exceptions import ConfigValidationError, InvalidNamingContextError
from alz_naming.naming.context import NamingModule
from alz_naming.naming.templates import ResourcePurpose
from alz_naming.regions import RegionAbbreviator


class TestResolveDeployment:
    """End-to-end resolution of names and configuration."""

    @pytest.fixture
    def deployment(self):
        return resolve_deployment(
            NamingModule.AVD,
            environment="prod",
            location="West Europe",
            random_suffix="ab12cd",
            overrides={"host_pool": {"maximum_sessions_allowed": 10}},
        )

    def test_names(self, deployment):
        assert deployment.name(ResourcePurpose.HOST_POOL) == "vdpool-prod-avd-we"
        assert deployment.name("profiles_storage") == "stprodavdprofab12cd"
        assert deployment.region == "we"

    def test_config(self, deployment):
        assert isinstance(deployment.config, AvdConfig)
        assert deployment.config.host_pool.maximum_sessions_allowed == 10
        assert deployment.config.host_pool.type == "Pooled"

    def test_names_read_only(self, deployment):
        with pytest.raises(TypeError):
            deployment.names[ResourcePurpose.HOST_POOL] = "other"  # type: ignore[index]

    def test_to_dict(self, deployment):
        data = deployment.to_dict()

        assert data["module"] == "avd"
        assert data["service"] == "avd"
        assert data["random_suffix"] == "ab12cd"
        assert data["names"]["host_pool"] == "vdpool-prod-avd-we"
        assert data["config"]["host_pool"]["maximum_sessions_allowed"] == 10

    def test_repeatable(self, deployment):
        again = resolve_deployment("avd", "prod", "West Europe", "ab12cd",
                                   overrides={"host_pool": {"maximum_sessions_allowed": 10}})

        assert again.to_dict() == deployment.to_dict()

    def test_invalid_overrides_fail_before_names(self):
        """Test no deployment is produced when overrides are invalid."""
        with pytest.raises(ConfigValidationError):
            resolve_deployment("avd", "prod", "West Europe", "ab12cd", overrides={"x": 1})

    def test_spoke_requires_service(self):
        with pytest.raises(InvalidNamingContextError):
            resolve_deployment("spoke", "prod", "UK South", "q1w2e")

    def test_spoke_with_service(self):
        deployment = resolve_deployment(
            "spoke", "prod", "UK South", "q1w2e", service="app"
        )

        assert isinstance(deployment.config, SpokeConfig)
        assert deployment.name(ResourcePurpose.VIRTUAL_NETWORK) == "vnet-prod-app-uks"

    def test_custom_abbreviator(self):
        deployment = resolve_deployment(
            "connectivity",
            "prod",
            "Mars Central",
            "abcd",
            abbreviator=RegionAbbreviator({"Mars Central": "mc"}),
        )

        assert deployment.region == "mc"
        assert deployment.name(ResourcePurpose.FIREWALL) == "afw-prod-hub-mc"
        assert deployment.name(ResourcePurpose.GATEWAY_SUBNET) == "GatewaySubnet"
