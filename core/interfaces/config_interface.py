"""Configuration service interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional
from core.models.config import AWSConfig, LaunchConfig, LauncherSettings


class IConfigService(ABC):
    """Interface for configuration management."""

    @abstractmethod
    def load_settings(self, config_path: Optional[str] = None) -> LauncherSettings:
        """Load launcher settings.

        Args:
            config_path: Optional path to a YAML configuration file

        Returns:
            LauncherSettings object

        Raises:
            ConfigurationError: If the file is invalid or not found
        """
        pass

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a configuration setting by key.

        Args:
            key: Setting key (supports dot notation)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        pass

    @abstractmethod
    def get_aws_config(self) -> AWSConfig:
        """Get provider credentials.

        Returns:
            AWSConfig built from the environment
        """
        pass

    @abstractmethod
    def get_launch_defaults(self, **overrides: Any) -> LaunchConfig:
        """Get the launch configuration defaults.

        Args:
            overrides: Command line values; None means not given

        Returns:
            LaunchConfig with overrides applied
        """
        pass
