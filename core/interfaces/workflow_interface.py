"""Launch orchestrator interface."""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Union
from core.models.config import LaunchConfig
from core.models.instance import InstanceHandle
from core.models.launch import LaunchResult


ReadyCallback = Callable[[InstanceHandle], Union[None, Awaitable[None]]]


class ILaunchOrchestrator(ABC):
    """Interface for the provisioning workflow."""

    @abstractmethod
    async def resolve_config(self, defaults: LaunchConfig,
                             interactive: bool = False) -> LaunchConfig:
        """Resolve the final launch configuration.

        Args:
            defaults: Values from the command line and configuration file
            interactive: Ask the operator for every parameter

        Returns:
            The resolved LaunchConfig

        Raises:
            ConfigurationError: If the configuration is incomplete
        """
        pass

    @abstractmethod
    async def launch(self, config: LaunchConfig,
                     on_ready: Optional[ReadyCallback] = None,
                     live_validated: bool = False) -> LaunchResult:
        """Create the instance and wait until it is no longer pending.

        Args:
            config: Resolved launch configuration
            on_ready: Called with the handle once the instance is running;
                when omitted the endpoint is looked up instead
            live_validated: The configuration was already checked against
                the provider's live values

        Returns:
            LaunchResult with the handle and endpoint

        Raises:
            ConfigurationError: Before any provider mutation
            LaunchFailedError: If the instance ends up in a non-running state
        """
        pass

    @abstractmethod
    async def run(self, defaults: LaunchConfig, interactive: bool = False,
                  on_ready: Optional[ReadyCallback] = None) -> LaunchResult:
        """Resolve the configuration and launch.

        Args:
            defaults: Values from the command line and configuration file
            interactive: Ask the operator for every parameter
            on_ready: Optional continuation for the running instance

        Returns:
            LaunchResult with execution details
        """
        pass
