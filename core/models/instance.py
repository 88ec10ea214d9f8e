"""Instance data model."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any


class InstanceStatus(Enum):
    """Instance status enumeration."""

    PENDING = "pending"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"
    STOPPING = "stopping"
    STOPPED = "stopped"
    UNKNOWN = "unknown"

    @classmethod
    def from_aws(cls, aws_state: Optional[str]) -> "InstanceStatus":
        """Map an EC2 state name to our InstanceStatus enum."""
        try:
            return cls(aws_state)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_pending(self) -> bool:
        return self == InstanceStatus.PENDING


class TerminalState(Enum):
    """Outcome of a launch once the instance is no longer pending."""

    RUNNING = "running"
    FAILED = "failed"
    TERMINATED = "terminated"
    UNKNOWN = "unknown"

    @classmethod
    def from_status(cls, status: InstanceStatus) -> "TerminalState":
        if status == InstanceStatus.RUNNING:
            return cls.RUNNING
        if status in (InstanceStatus.SHUTTING_DOWN, InstanceStatus.TERMINATED):
            return cls.TERMINATED
        if status in (InstanceStatus.STOPPING, InstanceStatus.STOPPED):
            return cls.FAILED
        return cls.UNKNOWN


@dataclass
class InstanceHandle:
    """A created instance, as returned by the provider."""

    instance_id: str
    region: str
    zone: Optional[str] = None
    image_id: Optional[str] = None
    instance_type: Optional[str] = None

    # Last observed state; refreshed by polling
    status: InstanceStatus = InstanceStatus.PENDING
    state_reason: Optional[str] = None

    launch_time: Optional[datetime] = None
    public_dns: Optional[str] = None
    public_ip: Optional[str] = None

    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.instance_id:
            raise ValueError("instance_id cannot be empty")

    @property
    def is_pending(self) -> bool:
        return self.status.is_pending

    @property
    def is_running(self) -> bool:
        return self.status == InstanceStatus.RUNNING

    @property
    def endpoint(self) -> Optional[str]:
        """Best known public address of the instance."""
        return self.public_dns or self.public_ip

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "region": self.region,
            "zone": self.zone,
            "image_id": self.image_id,
            "instance_type": self.instance_type,
            "status": self.status.value,
            "state_reason": self.state_reason,
            "launch_time": self.launch_time.isoformat() if self.launch_time else None,
            "endpoint": self.endpoint,
        }
