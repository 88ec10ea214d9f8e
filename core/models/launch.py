from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from core.models.config import LaunchConfig
from core.models.instance import InstanceHandle, TerminalState


class LaunchStatus(Enum):
    """Overall launch status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class LaunchResult:
    """Result of a single provisioning run."""

    launch_id: str = field(default_factory=lambda: str(uuid4()))
    status: LaunchStatus = LaunchStatus.PENDING

    # Inputs as resolved
    config: Optional[LaunchConfig] = None
    image_id: Optional[str] = None

    # Outputs
    handle: Optional[InstanceHandle] = None
    terminal_state: Optional[TerminalState] = None
    endpoint: Optional[str] = None
    poll_attempts: int = 0

    # Timing
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    errors: List[str] = field(default_factory=list)

    @property
    def duration(self) -> Optional[timedelta]:
        """Calculate launch duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return None

    @property
    def is_successful(self) -> bool:
        return self.status == LaunchStatus.COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.status == LaunchStatus.FAILED

    def mark_started(self) -> None:
        self.status = LaunchStatus.RUNNING
        if self.start_time is None:
            self.start_time = datetime.utcnow()

    def mark_completed(self) -> None:
        self.status = LaunchStatus.COMPLETED
        self.end_time = datetime.utcnow()

    def mark_failed(self, error: str) -> None:
        self.status = LaunchStatus.FAILED
        self.end_time = datetime.utcnow()
        self.errors.append(error)

    def get_summary(self) -> Dict[str, Any]:
        """Get launch summary."""
        return {
            "launch_id": self.launch_id,
            "status": self.status.value,
            "image_id": self.image_id,
            "instance_id": self.handle.instance_id if self.handle else None,
            "terminal_state": self.terminal_state.value if self.terminal_state else None,
            "endpoint": self.endpoint,
            "poll_attempts": self.poll_attempts,
            "duration": str(self.duration) if self.duration else None,
            "config": self.config.to_dict() if self.config else None,
            "errors": list(self.errors),
        }
