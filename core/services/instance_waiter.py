import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Tuple

from core.exceptions import LaunchCancelledError, PollTimeoutError
from core.interfaces.provider_interface import IProviderGateway
from core.models.config import PollingConfig
from core.models.instance import InstanceHandle, InstanceStatus


class InstanceWaiter:
    """Polls an instance until it leaves the pending state."""

    def __init__(
        self,
        gateway: IProviderGateway,
        polling: Optional[PollingConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gateway = gateway
        self.polling = polling or PollingConfig()
        self._sleep = sleep
        self._clock = clock
        self.logger = logging.getLogger(__name__)

    async def wait_until_not_pending(
        self,
        handle: InstanceHandle,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Tuple[InstanceStatus, int]:
        """Wait for the instance to leave ``pending``.

        Returns the first non-pending status and the number of status checks
        made. Sleeps ``interval_seconds`` between checks, so a status
        sequence of pending, pending, running sleeps exactly twice.

        Raises:
            PollTimeoutError: max_attempts or timeout_seconds exhausted
            LaunchCancelledError: cancel_event was set between checks
        """
        max_attempts = self.polling.max_attempts
        timeout_seconds = self.polling.timeout_seconds
        start = self._clock()
        attempts = 0

        while True:
            if cancel_event is not None and cancel_event.is_set():
                self.logger.warning(f"Wait for {handle.instance_id} cancelled")
                raise LaunchCancelledError(handle.instance_id)

            status = await self.gateway.get_status(handle)
            attempts += 1

            if not status.is_pending:
                self.logger.info(
                    f"Instance {handle.instance_id} is {status.value} after {attempts} checks"
                )
                return status, attempts

            elapsed = self._clock() - start
            if max_attempts is not None and attempts >= max_attempts:
                raise PollTimeoutError(handle.instance_id, attempts, elapsed)
            if timeout_seconds is not None and elapsed >= timeout_seconds:
                raise PollTimeoutError(handle.instance_id, attempts, elapsed)

            self.logger.debug(
                f"Instance {handle.instance_id} still pending, "
                f"checking again in {self.polling.interval_seconds}s"
            )
            await self._sleep(self.polling.interval_seconds)
