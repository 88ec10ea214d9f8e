"""Configuration service implementation."""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Mapping, Optional
from dataclasses import asdict, replace

from core.exceptions import ConfigurationError, LauncherError
from core.interfaces.config_interface import IConfigService
from core.models.config import (
    Architecture,
    AWSConfig,
    LaunchConfig,
    LauncherSettings,
    LogLevel,
    PollingConfig,
    StorageType,
    DEFAULT_INSTANCE_TYPE,
    DEFAULT_SECURITY_GROUP,
    DEFAULT_ZONE,
)


class ConfigService(IConfigService):
    """Implementation of configuration service."""

    ENV_MAPPINGS = {
        "LAUNCHER_ZONE": "launch.zone",
        "LAUNCHER_SECURITY_GROUP": "launch.security_group",
        "LAUNCHER_INSTANCE_TYPE": "launch.instance_type",
        "LAUNCHER_KEY_NAME": "launch.key_name",
        "LAUNCHER_POLL_INTERVAL": "polling.interval_seconds",
        "LAUNCHER_LOG_LEVEL": "log_level",
    }

    # Everything else is taken verbatim; key names like "true" stay strings
    NUMERIC_SETTINGS = {"polling.interval_seconds"}

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.logger = logging.getLogger(__name__)
        self._environ = os.environ if environ is None else environ
        self._settings: Optional[LauncherSettings] = None

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Centralized error handling and logging.

        The caller prints configuration errors, so they are only logged at
        debug level here. Foreign errors are wrapped in ConfigurationError.
        """
        self.logger.debug(f"Error {operation}: {str(error)}")
        if isinstance(error, LauncherError):
            raise error
        raise ConfigurationError(f"Error {operation}: {error}") from error

    def load_settings(self, config_path: Optional[str] = None) -> LauncherSettings:
        """Load settings from an optional YAML file plus environment overrides."""
        try:
            raw_config: Dict[str, Any] = {}

            if config_path:
                path = Path(config_path)
                if not path.exists():
                    raise ConfigurationError(
                        f"Configuration file not found: {config_path}"
                    )

                with open(path, "r", encoding="utf-8") as file:
                    loaded = yaml.safe_load(file)

                if loaded is None:
                    loaded = {}
                if not isinstance(loaded, dict):
                    raise ConfigurationError(
                        "Configuration file must contain a mapping"
                    )
                raw_config = loaded

            self._apply_environment_overrides(raw_config)
            settings = self._parse_settings(raw_config)

            errors = settings.validate()
            if errors:
                raise ConfigurationError(
                    f"Configuration validation failed: {'; '.join(errors)}"
                )

            self._settings = settings
            return settings

        except (ConfigurationError, OSError, yaml.YAMLError, ValueError, TypeError) as e:
            self._handle_error("loading launcher configuration", e)

    def get_settings(self) -> LauncherSettings:
        if self._settings is None:
            return self.load_settings()
        return self._settings

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a configuration setting by key path (e.g., 'polling.interval_seconds')."""
        if not self._settings:
            return default

        value: Any = asdict(self._settings)
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_aws_config(self) -> AWSConfig:
        """Get provider credentials read from the environment at load time."""
        return self.get_settings().aws

    def get_launch_defaults(self, **overrides: Any) -> LaunchConfig:
        """Get launch defaults with command line overrides applied."""
        base = self.get_settings().launch
        changes = {k: v for k, v in overrides.items() if v is not None}

        unknown = set(changes) - set(LaunchConfig.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"Unknown launch options: {', '.join(sorted(unknown))}")

        if "architecture" in changes:
            changes["architecture"] = Architecture.from_flag(changes["architecture"])
        if "storage_type" in changes:
            changes["storage_type"] = StorageType.from_flag(changes["storage_type"])

        return replace(base, **changes)

    def _parse_settings(self, raw_config: Dict[str, Any]) -> LauncherSettings:
        """Parse raw configuration into a LauncherSettings object."""
        interactive_data = raw_config.get("interactive") or {}
        images = raw_config.get("images") or {}
        if not isinstance(images, dict):
            raise ConfigurationError("'images' must map regions to image lists")

        return LauncherSettings(
            launch=self._parse_launch_config(raw_config.get("launch") or {}),
            polling=self._parse_polling_config(raw_config.get("polling") or {}),
            aws=self._read_credentials(),
            max_prompt_attempts=int(interactive_data.get("max_prompt_attempts", 3)),
            images={str(region): list(row or []) for region, row in images.items()},
            skip_validation=bool(raw_config.get("skip_validation", False)),
            log_level=self._parse_log_level(raw_config.get("log_level", "INFO")),
            log_file=raw_config.get("log_file"),
        )

    def _parse_launch_config(self, launch_data: Dict[str, Any]) -> LaunchConfig:
        """Parse the launch section into a LaunchConfig."""
        key_name = launch_data.get("key_name")
        return LaunchConfig(
            zone=str(launch_data.get("zone", DEFAULT_ZONE)),
            security_group=str(launch_data.get("security_group", DEFAULT_SECURITY_GROUP)),
            instance_type=str(launch_data.get("instance_type", DEFAULT_INSTANCE_TYPE)),
            architecture=Architecture.from_flag(launch_data.get("architecture", "64")),
            storage_type=StorageType.from_flag(launch_data.get("storage_type", "ebs")),
            key_name=str(key_name) if key_name else None,
        )

    def _parse_polling_config(self, polling_data: Dict[str, Any]) -> PollingConfig:
        """Parse the polling section into a PollingConfig."""
        max_attempts = polling_data.get("max_attempts")
        timeout_seconds = polling_data.get("timeout_seconds")
        return PollingConfig(
            interval_seconds=float(polling_data.get("interval_seconds", 1.0)),
            max_attempts=int(max_attempts) if max_attempts is not None else None,
            timeout_seconds=float(timeout_seconds) if timeout_seconds is not None else None,
        )

    def _parse_log_level(self, log_level_str: str) -> LogLevel:
        """Parse log level string into LogLevel enum."""
        try:
            return LogLevel[str(log_level_str).upper()]
        except KeyError:
            return LogLevel.INFO

    def _read_credentials(self) -> AWSConfig:
        """Build AWSConfig from the standard AWS environment variables.

        Expected environment variables:
        - AWS_ACCESS_KEY_ID
        - AWS_SECRET_ACCESS_KEY
        - AWS_SESSION_TOKEN (optional)
        - AWS_PROFILE (optional)
        """
        access_key = self._environ.get("AWS_ACCESS_KEY_ID")
        secret_key = self._environ.get("AWS_SECRET_ACCESS_KEY")

        if bool(access_key) != bool(secret_key):
            self.logger.warning(
                "Only one of AWS_ACCESS_KEY_ID/AWS_SECRET_ACCESS_KEY is set, "
                "falling back to the default credential chain"
            )
            access_key = secret_key = None

        return AWSConfig(
            access_key_id=access_key or None,
            secret_access_key=secret_key or None,
            session_token=self._environ.get("AWS_SESSION_TOKEN") or None,
            profile_name=self._environ.get("AWS_PROFILE") or None,
        )

    def _apply_environment_overrides(self, config: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration."""
        for env_var, config_key in self.ENV_MAPPINGS.items():
            env_value = self._environ.get(env_var)
            if env_value is not None:
                if config_key in self.NUMERIC_SETTINGS:
                    try:
                        env_value = float(env_value)
                    except ValueError:
                        raise ConfigurationError(
                            f"{env_var} must be a number, got '{env_value}'"
                        ) from None

                self._set_nested_value(config, config_key, env_value)

    def _set_nested_value(
        self, config: Dict[str, Any], key_path: str, value: Any
    ) -> None:
        """Set a nested value in configuration dictionary."""
        keys = key_path.split(".")
        current = config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value
