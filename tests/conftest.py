import os
from pathlib import Path

import pytest

from alz_naming.config.models import AvdConfig
from alz_naming.naming.context import NamingContext

# ============================================================================
# Environment isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolate_alz_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Drop ALZ_* variables and point the default config file into tmp_path."""
    for key in list(os.environ):
        if key.startswith("ALZ_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ALZ_CONFIG_PATH", str(tmp_path / "no-such-config.yaml"))


# ============================================================================
# Naming fixtures
# ============================================================================


@pytest.fixture
def avd_context() -> NamingContext:
    """Production AVD deployment in West Europe with a persisted suffix."""
    return NamingContext(
        environment="prod",
        location="West Europe",
        service="avd",
        random_suffix="ab12cd",
    )


@pytest.fixture
def hub_context() -> NamingContext:
    return NamingContext(
        environment="prod",
        location="UK South",
        service="hub",
        random_suffix="x9y8",
    )


# ============================================================================
# Configuration fixtures
# ============================================================================


@pytest.fixture
def avd_defaults() -> AvdConfig:
    return AvdConfig()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Path for a temporary override file (not created)."""
    config_dir = tmp_path / ".config" / "alz-naming"
    config_dir.mkdir(parents=True)
    return config_dir / "config.yaml"
