"""
Configuration loader for landing zone module overrides.

Handles loading from multiple sources with proper priority:
CLI Args > Environment Variables > Config File > Defaults

The override document holds one top-level key per module::

    avd:
      host_pool:
        maximum_sessions_allowed: 10
    connectivity:
      firewall:
        sku_tier: Premium
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union, get_args, get_origin

import yaml

from ..exceptions import ConfigLoadError
from ..naming.context import NamingModule
from .models import MODULE_CONFIG_MODELS, LandingZoneConfig
from .resolver import field_type_at, resolve_module


class ConfigLoader:
    """
    Loads and merges override documents from multiple sources.

    Priority order (highest to lowest):
    1. CLI arguments (passed directly to methods)
    2. Environment variables (ALZ_<MODULE>__<FIELD>__...)
    3. Configuration file
    4. Module defaults
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "alz-naming"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
    ENV_PREFIX = "ALZ_"
    CONFIG_PATH_ENV = "ALZ_CONFIG_PATH"

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Path to configuration file. If None, uses default location.
        """
        self.config_path = (
            Path(config_path) if config_path else self._get_config_path_from_env()
        )

    @classmethod
    def _get_config_path_from_env(cls) -> Path:
        """Get configuration path from environment variable or default."""
        env_path = os.environ.get(cls.CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path).expanduser()
        return cls.DEFAULT_CONFIG_FILE

    def load_overrides(self, module: Union[NamingModule, str]) -> Dict[str, Any]:
        """
        Collect the raw override document for one module (file, then env).

        Returns:
            Override dictionary, empty when nothing is configured

        Raises:
            ConfigLoadError: If the file cannot be read or parsed
        """
        module = NamingModule(module)
        overrides: Dict[str, Any] = {}

        if self.config_path.exists():
            file_config = self._load_file(self.config_path)
            section = file_config.get(module.value) or {}
            if not isinstance(section, dict):
                raise ConfigLoadError(
                    f"Section '{module.value}' in {self.config_path} must be a mapping",
                    path=str(self.config_path),
                )
            overrides = self._deep_merge(overrides, section)

        overrides = self._deep_merge(overrides, self._load_from_env(module))
        return overrides

    def load(
        self,
        module: Union[NamingModule, str],
        cli_args: Optional[Dict[str, Any]] = None,
    ) -> LandingZoneConfig:
        """
        Load overrides from all sources and resolve them against defaults.

        Args:
            module: Module whose configuration is loaded
            cli_args: Highest-priority overrides; None values are ignored

        Returns:
            Resolved, validated configuration tree

        Raises:
            ConfigLoadError: If the file cannot be read
            ConfigValidationError: If the merged overrides are invalid
        """
        overrides = self.load_overrides(module)
        if cli_args:
            overrides = self._deep_merge(overrides, self._filter_none_values(cli_args))
        return resolve_module(module, overrides)

    def _load_file(self, path: Path) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Configuration dictionary

        Raises:
            ConfigLoadError: If file cannot be read or parsed
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Invalid YAML in {path}: {e}", path=str(path)) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Cannot read config file {path}: {e}", path=str(path)
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Config file {path} must contain a mapping of modules", path=str(path)
            )
        unknown = [key for key in data if key not in {m.value for m in NamingModule}]
        if unknown:
            raise ConfigLoadError(
                f"Unknown module section(s) in {path}: {', '.join(map(str, unknown))}",
                path=str(path),
            )
        return data

    def _load_from_env(self, module: NamingModule) -> Dict[str, Any]:
        """
        Load overrides for one module from environment variables.

        Environment variable format:
        - ALZ_AVD__HOST_POOL__MAXIMUM_SESSIONS_ALLOWED=10
        - ALZ_CONNECTIVITY__FIREWALL__SKU_TIER=Premium
        - ALZ_MANAGEMENT__LOG_ANALYTICS__RETENTION_IN_DAYS=90

        Double underscore (__) separates nested keys.

        Returns:
            Configuration dictionary
        """
        config: Dict[str, Any] = {}
        prefix = f"{self.ENV_PREFIX}{module.value.upper()}__"

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue

            parts = key[len(prefix) :].lower().split("__")

            current = config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            target = field_type_at(MODULE_CONFIG_MODELS[module], parts)
            current[parts[-1]] = self._convert_env_value(value, target)

        return config

    def _convert_env_value(self, value: str, target: Optional[Any] = None) -> Any:
        """
        Convert environment variable string to appropriate type.

        When the target field type is known only that type is attempted, so a
        numeric-looking value for a string field stays a string. Unknown
        targets fall back to guessing.

        Args:
            value: Environment variable value as string
            target: Scalar type of the field the variable sets, if known

        Returns:
            Converted value (bool, int, float, or str)
        """
        if target is str:
            return value
        if get_origin(target) is Literal and all(
            isinstance(arg, str) for arg in get_args(target)
        ):
            return value
        if target is bool:
            return self._convert_bool(value)
        if target is int:
            return self._convert_number(value, int)
        if target is float:
            return self._convert_number(value, float)

        converted = self._convert_bool(value)
        if converted is not value:
            return converted
        return self._convert_number(value, float if "." in value else int)

    @staticmethod
    def _convert_bool(value: str) -> Any:
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False
        return value

    @staticmethod
    def _convert_number(value: str, number_type: type) -> Any:
        try:
            return number_type(value)
        except ValueError:
            return value

    def _deep_merge(
        self, base: Dict[str, Any], update: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Deep merge two raw override documents.

        Args:
            base: Base dictionary
            update: Dictionary with updates

        Returns:
            Merged dictionary (base is not modified)
        """
        result = base.copy()

        for key, value in update.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _filter_none_values(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recursively filter out None values from a dictionary.

        Args:
            data: Dictionary to filter

        Returns:
            New dictionary without None values
        """
        result = {}
        for key, value in data.items():
            if value is None:
                continue
            elif isinstance(value, dict):
                filtered = self._filter_none_values(value)
                if filtered:
                    result[key] = filtered
            else:
                result[key] = value
        return result

    def write_default_config(self, force: bool = False) -> Path:
        """
        Create an example override file with comments.

        Args:
            force: Overwrite existing file if True

        Returns:
            Path to created configuration file

        Raises:
            ConfigLoadError: If file exists and force=False
        """
        if self.config_path.exists() and not force:
            raise ConfigLoadError(
                f"Configuration file already exists at {self.config_path}. "
                "Use force=True to overwrite.",
                path=str(self.config_path),
            )

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, "w") as f:
                f.write(DEFAULT_CONFIG_YAML)
        except OSError as e:
            raise ConfigLoadError(
                f"Cannot write config file {self.config_path}: {e}",
                path=str(self.config_path),
            ) from e

        return self.config_path


DEFAULT_CONFIG_YAML = """\
# Azure Landing Zone - Module Configuration Overrides
# ===================================================
# Only list values that differ from the module defaults. Nested objects are
# merged field by field; lists and keyed maps (schedules, subnets, rule
# collection groups, management groups) replace the defaults entirely.

avd:
  host_pool:
    # Maximum concurrent sessions per session host
    maximum_sessions_allowed: 16

  # scaling_plan:
  #   time_zone: "W. Europe Standard Time"
  #   schedules:
  #     weekdays:
  #       days_of_week: [Monday, Tuesday, Wednesday, Thursday, Friday]
  #       ramp_up_start_time: "06:30"

  # fslogix:
  #   share_quota_gb: 200

connectivity:
  firewall:
    # Basic, Standard or Premium
    sku_tier: Standard

  # vpn_gateway:
  #   enabled: true

# core:
#   root_management_group:
#     id: contoso
#     display_name: Contoso

management:
  log_analytics:
    # Retention in days (30-730)
    retention_in_days: 30

# spoke:
#   virtual_network:
#     address_space: ["10.2.0.0/24"]
#     subnets:
#       workload:
#         address_prefix: "10.2.0.0/25"
"""


def load_config(
    module: Union[NamingModule, str],
    config_path: Optional[Path] = None,
    cli_args: Optional[Dict[str, Any]] = None,
) -> LandingZoneConfig:
    """
    Convenience function to load a module's configuration.

    Args:
        module: Module whose configuration is loaded
        config_path: Path to configuration file
        cli_args: CLI arguments to merge (highest priority)

    Returns:
        Resolved configuration tree

    Raises:
        ConfigLoadError: If the configuration file is unreadable
        ConfigValidationError: If the overrides are invalid
    """
    return ConfigLoader(config_path).load(module, cli_args)


def create_default_config(
    config_path: Optional[Path] = None,
    force: bool = False,
) -> Path:
    """
    Create default configuration file.

    Args:
        config_path: Path to configuration file
        force: Overwrite existing file if True

    Returns:
        Path to created configuration file

    Raises:
        ConfigLoadError: If file exists and force=False
    """
    loader = ConfigLoader(config_path)
    return loader.write_default_config(force=force)
