import asyncio
import inspect
import logging
from dataclasses import replace
from typing import Optional

from core.exceptions import ConfigurationError, LaunchFailedError
from core.interfaces.provider_interface import IProviderGateway
from core.interfaces.workflow_interface import ILaunchOrchestrator, ReadyCallback
from core.models.config import LaunchConfig
from core.models.instance import TerminalState
from core.models.launch import LaunchResult
from core.models.region import RegionInfo
from core.services.image_catalog import ImageCatalog
from core.services.instance_waiter import InstanceWaiter
from core.services.selection_service import ParameterSelector


class LaunchOrchestrator(ILaunchOrchestrator):
    """Resolves a launch configuration, creates one instance and waits for it."""

    def __init__(
        self,
        gateway: IProviderGateway,
        image_catalog: Optional[ImageCatalog] = None,
        selector: Optional[ParameterSelector] = None,
        waiter: Optional[InstanceWaiter] = None,
        skip_validation: bool = False,
        cancel_event: Optional[asyncio.Event] = None,
    ):
        self.gateway = gateway
        self.image_catalog = image_catalog or ImageCatalog()
        self.selector = selector or ParameterSelector(gateway, image_catalog=self.image_catalog)
        self.waiter = waiter or InstanceWaiter(gateway)
        self.skip_validation = skip_validation
        self.cancel_event = cancel_event
        self.last_result: Optional[LaunchResult] = None
        self.logger = logging.getLogger(__name__)

    def _handle_error(self, message: str, error: Exception) -> str:
        """Centralized error handling."""
        error_msg = f"{message}: {str(error)}"
        self.logger.error(error_msg)
        return error_msg

    async def resolve_config(self, defaults: LaunchConfig,
                             interactive: bool = False) -> LaunchConfig:
        """Resolve the configuration, interactively or from defaults."""
        if interactive:
            config = await self.selector.select(defaults)
        else:
            config = replace(defaults)

        self._check_complete(config)
        return config

    def _check_complete(self, config: LaunchConfig) -> None:
        errors = config.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))

    async def validate_live(self, config: LaunchConfig) -> RegionInfo:
        """Check zone, security group and key pair against the provider."""
        region = config.region
        info = RegionInfo(region, zones=await self.gateway.list_zones(region))
        if not info.has_zone(config.zone):
            raise ConfigurationError(
                f"Availability zone {config.zone} not found in {region}"
            )

        info.security_groups = await self.gateway.list_security_groups(region)
        if not info.has_security_group(config.security_group):
            raise ConfigurationError(
                f"Security group {config.security_group} not found in {region}"
            )

        info.key_pairs = await self.gateway.list_key_pairs(region)
        if not info.has_key_pair(config.key_name):
            raise ConfigurationError(
                f"Key pair {config.key_name} not found in {region}"
            )
        return info

    async def launch(self, config: LaunchConfig,
                     on_ready: Optional[ReadyCallback] = None,
                     live_validated: bool = False) -> LaunchResult:
        """Look up the image, create the instance and wait for it."""
        result = LaunchResult(config=config)
        self.last_result = result
        result.mark_started()

        try:
            self._check_complete(config)
            region = config.region

            # Fails before anything is created for regions without images
            result.image_id = self.image_catalog.lookup(
                region, config.architecture, config.storage_type
            )

            if not (live_validated or self.skip_validation):
                await self.validate_live(config)

            self.logger.info(
                f"Creating {config.instance_type} instance from {result.image_id} "
                f"in {config.zone}"
            )
            handle = await self.gateway.create_instance(
                result.image_id,
                config.zone,
                config.security_group,
                config.instance_type,
                config.key_name,
            )
            result.handle = handle
            self.logger.info(f"Created instance {handle.instance_id}, waiting for it to start")

            status, attempts = await self.waiter.wait_until_not_pending(
                handle, self.cancel_event
            )
            result.poll_attempts = attempts
            result.terminal_state = TerminalState.from_status(status)

            if result.terminal_state != TerminalState.RUNNING:
                raise LaunchFailedError(handle, result.terminal_state, handle.state_reason)

            if on_ready is not None:
                outcome = on_ready(handle)
                if inspect.isawaitable(outcome):
                    await outcome
            else:
                result.endpoint = await self.gateway.get_endpoint(handle)

            result.mark_completed()
            self.logger.info(f"Launch completed: {result.get_summary()}")

        except Exception as e:
            result.mark_failed(self._handle_error("Launch failed", e))
            raise

        return result

    async def run(self, defaults: LaunchConfig, interactive: bool = False,
                  on_ready: Optional[ReadyCallback] = None) -> LaunchResult:
        """Resolve the configuration and launch one instance."""
        config = await self.resolve_config(defaults, interactive)
        return await self.launch(config, on_ready, live_validated=interactive)
