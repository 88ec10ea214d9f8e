"""Shared pytest fixtures for all test modules."""

import io
from typing import Dict, List, Optional

import pytest

from core.interfaces.provider_interface import IProviderGateway
from core.models.instance import InstanceHandle, InstanceStatus
from core.utils.prompt import ConsolePrompter


class FakeGateway(IProviderGateway):
    """In-memory provider gateway that records every call."""

    def __init__(
        self,
        regions: Optional[List[str]] = None,
        zones: Optional[Dict[str, List[str]]] = None,
        groups: Optional[Dict[str, List[str]]] = None,
        keys: Optional[Dict[str, List[str]]] = None,
        statuses: Optional[List[InstanceStatus]] = None,
        endpoint: str = "ec2-54-1-2-3.compute-1.amazonaws.com",
    ):
        self.regions = regions or ["eu-west-1", "us-east-1"]
        self.zones = zones or {
            "us-east-1": ["us-east-1a", "us-east-1b"],
            "eu-west-1": ["eu-west-1a", "eu-west-1b"],
        }
        self.groups = groups or {"us-east-1": ["default", "web"], "eu-west-1": ["default"]}
        self.keys = keys or {"us-east-1": ["mykey", "other"], "eu-west-1": ["mykey"]}
        self.statuses = list(statuses or [InstanceStatus.PENDING, InstanceStatus.RUNNING])
        self.endpoint = endpoint
        self.calls = []
        self.created = []
        self.imported = []
        self.create_error: Optional[Exception] = None

    def count(self, name: str) -> int:
        return len([c for c in self.calls if c[0] == name])

    async def list_regions(self) -> List[str]:
        self.calls.append(("list_regions",))
        return list(self.regions)

    async def list_zones(self, region: str) -> List[str]:
        self.calls.append(("list_zones", region))
        return list(self.zones.get(region, []))

    async def list_security_groups(self, region: str) -> List[str]:
        self.calls.append(("list_security_groups", region))
        return list(self.groups.get(region, []))

    async def list_key_pairs(self, region: str) -> List[str]:
        self.calls.append(("list_key_pairs", region))
        return list(self.keys.get(region, []))

    async def import_key_pair(self, region: str, name: str, public_key: bytes) -> str:
        self.calls.append(("import_key_pair", region, name))
        self.imported.append((region, name, public_key))
        self.keys.setdefault(region, []).append(name)
        return name

    async def create_instance(self, image_id, zone, security_group, instance_type, key_name):
        self.calls.append(("create_instance", image_id, zone))
        self.created.append((image_id, zone, security_group, instance_type, key_name))
        if self.create_error is not None:
            raise self.create_error
        return InstanceHandle(
            instance_id="i-0123456789abcdef0",
            region=zone[:-1],
            zone=zone,
            image_id=image_id,
            instance_type=instance_type,
        )

    async def get_status(self, handle: InstanceHandle) -> InstanceStatus:
        self.calls.append(("get_status", handle.instance_id))
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        handle.status = status
        return status

    async def get_endpoint(self, handle: InstanceHandle) -> str:
        self.calls.append(("get_endpoint", handle.instance_id))
        return self.endpoint


@pytest.fixture
def gateway():
    """Fake gateway with two regions, running after one pending check."""
    return FakeGateway()


@pytest.fixture
def make_prompter():
    """Return a factory for prompters that answer from a list."""

    def _make(answers):
        remaining = iter(answers)
        return ConsolePrompter(input_func=lambda _: next(remaining), stream=io.StringIO())

    return _make
