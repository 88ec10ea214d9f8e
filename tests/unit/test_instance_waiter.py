"""Unit tests for the readiness poll loop."""

import asyncio

import pytest

from core.exceptions import LaunchCancelledError, PollTimeoutError
from core.models.config import PollingConfig
from core.models.instance import InstanceHandle, InstanceStatus
from core.services.instance_waiter import InstanceWaiter
from tests.conftest import FakeGateway


class RecordingSleep:
    """Records requested delays instead of sleeping."""

    def __init__(self, clock=None, on_sleep=None):
        self.delays = []
        self.clock = clock
        self.on_sleep = on_sleep

    async def __call__(self, delay):
        self.delays.append(delay)
        if self.clock is not None:
            self.clock.now += delay
        if self.on_sleep is not None:
            self.on_sleep()


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_handle():
    return InstanceHandle(instance_id="i-0123456789abcdef0", region="us-east-1")


class TestInstanceWaiter:
    """Test cases for InstanceWaiter."""

    @pytest.mark.asyncio
    async def test_two_waits_for_pending_pending_running(self):
        gateway = FakeGateway(statuses=[
            InstanceStatus.PENDING, InstanceStatus.PENDING, InstanceStatus.RUNNING,
        ])
        sleep = RecordingSleep()
        waiter = InstanceWaiter(gateway, PollingConfig(interval_seconds=1.0), sleep=sleep)

        status, attempts = await waiter.wait_until_not_pending(make_handle())

        assert status == InstanceStatus.RUNNING
        assert attempts == 3
        assert sleep.delays == [1.0, 1.0]
        assert gateway.count("get_status") == 3

    @pytest.mark.asyncio
    async def test_returns_first_non_pending_status(self):
        """Any non-pending status ends the loop; branching is the caller's job."""
        gateway = FakeGateway(statuses=[InstanceStatus.PENDING, InstanceStatus.TERMINATED])
        sleep = RecordingSleep()
        waiter = InstanceWaiter(gateway, sleep=sleep)

        status, attempts = await waiter.wait_until_not_pending(make_handle())

        assert status == InstanceStatus.TERMINATED
        assert attempts == 2
        assert sleep.delays == [1.0]

    @pytest.mark.asyncio
    async def test_no_wait_when_already_running(self):
        gateway = FakeGateway(statuses=[InstanceStatus.RUNNING])
        sleep = RecordingSleep()
        waiter = InstanceWaiter(gateway, sleep=sleep)

        status, attempts = await waiter.wait_until_not_pending(make_handle())

        assert status == InstanceStatus.RUNNING
        assert attempts == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_max_attempts(self):
        gateway = FakeGateway(statuses=[InstanceStatus.PENDING])
        sleep = RecordingSleep()
        waiter = InstanceWaiter(gateway, PollingConfig(max_attempts=3), sleep=sleep)

        with pytest.raises(PollTimeoutError) as exc_info:
            await waiter.wait_until_not_pending(make_handle())

        assert exc_info.value.attempts == 3
        assert gateway.count("get_status") == 3
        assert len(sleep.delays) == 2

    @pytest.mark.asyncio
    async def test_timeout(self):
        gateway = FakeGateway(statuses=[InstanceStatus.PENDING])
        clock = FakeClock()
        sleep = RecordingSleep(clock=clock)
        waiter = InstanceWaiter(
            gateway,
            PollingConfig(interval_seconds=2.0, timeout_seconds=5.0),
            sleep=sleep,
            clock=clock,
        )

        with pytest.raises(PollTimeoutError, match="still pending"):
            await waiter.wait_until_not_pending(make_handle())

        # Checks at t=0, 2, 4 and 6; the last one exceeds the deadline
        assert gateway.count("get_status") == 4
        assert sleep.delays == [2.0, 2.0, 2.0]

    @pytest.mark.asyncio
    async def test_cancel_between_checks(self):
        gateway = FakeGateway(statuses=[InstanceStatus.PENDING])
        cancel = asyncio.Event()
        sleep = RecordingSleep(on_sleep=cancel.set)
        waiter = InstanceWaiter(gateway, sleep=sleep)

        with pytest.raises(LaunchCancelledError):
            await waiter.wait_until_not_pending(make_handle(), cancel)

        assert gateway.count("get_status") == 1

    @pytest.mark.asyncio
    async def test_cancelled_before_first_check(self):
        gateway = FakeGateway()
        cancel = asyncio.Event()
        cancel.set()
        waiter = InstanceWaiter(gateway, sleep=RecordingSleep())

        with pytest.raises(LaunchCancelledError):
            await waiter.wait_until_not_pending(make_handle(), cancel)

        assert gateway.count("get_status") == 0
