from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from core.exceptions import ConfigurationError
from core.models.region import region_from_zone


# Provider size classes offered by the interactive menu, smallest first.
INSTANCE_TYPES = [
    "t1.micro",
    "m1.small",
    "m1.medium",
    "m1.large",
    "m1.xlarge",
    "c1.medium",
    "c1.xlarge",
    "m2.xlarge",
    "m2.2xlarge",
    "m2.4xlarge",
    "cc1.4xlarge",
    "cc2.8xlarge",
    "cg1.4xlarge",
]

DEFAULT_ZONE = "us-east-1a"
DEFAULT_SECURITY_GROUP = "default"
DEFAULT_INSTANCE_TYPE = INSTANCE_TYPES[0]


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Architecture(Enum):
    """CPU architecture of the machine image."""
    X86_64 = "64"
    I386 = "32"

    @property
    def index(self) -> int:
        """Position of this architecture in an image table row (64=0, 32=1)."""
        return 0 if self is Architecture.X86_64 else 1

    @property
    def label(self) -> str:
        return f"{self.value}-bit"

    @classmethod
    def from_flag(cls, value) -> "Architecture":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            raise ConfigurationError(f"Invalid architecture: {value}") from None


class StorageType(Enum):
    """Root storage of the machine image."""
    EBS = "ebs"
    INSTANCE_STORE = "instance"

    @property
    def index(self) -> int:
        """Position of this storage type in an image table row (ebs=0, instance=1)."""
        return 0 if self is StorageType.EBS else 1

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_flag(cls, value) -> "StorageType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Invalid store: {value}") from None


@dataclass
class AWSConfig:
    """AWS credentials, built once at start and handed to the session manager."""
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = field(default=None, repr=False)
    session_token: Optional[str] = field(default=None, repr=False)
    profile_name: Optional[str] = None

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)


@dataclass
class PollingConfig:
    """Readiness poll settings."""
    interval_seconds: float = 1.0
    max_attempts: Optional[int] = None
    timeout_seconds: Optional[float] = None


@dataclass
class LaunchConfig:
    """The fully resolved provisioning request."""
    zone: str = DEFAULT_ZONE
    security_group: str = DEFAULT_SECURITY_GROUP
    instance_type: str = DEFAULT_INSTANCE_TYPE
    architecture: Architecture = Architecture.X86_64
    storage_type: StorageType = StorageType.EBS
    key_name: Optional[str] = None

    @property
    def region(self) -> str:
        return region_from_zone(self.zone)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.zone:
            errors.append("Availability zone is required")
        else:
            try:
                region_from_zone(self.zone)
            except ConfigurationError as e:
                errors.append(str(e))

        if not self.security_group:
            errors.append("Security group is required")

        if not self.instance_type:
            errors.append("Instance type is required")
        elif self.instance_type not in INSTANCE_TYPES:
            errors.append(f"Unknown instance type: {self.instance_type}")

        if not isinstance(self.architecture, Architecture):
            errors.append(f"Invalid architecture: {self.architecture}")

        if not isinstance(self.storage_type, StorageType):
            errors.append(f"Invalid store: {self.storage_type}")

        if not self.key_name:
            errors.append("Key name is required (use --key or --interactive)")

        return errors

    def to_dict(self) -> Dict[str, str]:
        return {
            "zone": self.zone,
            "region": self.region,
            "security_group": self.security_group,
            "instance_type": self.instance_type,
            "architecture": self.architecture.label,
            "storage_type": self.storage_type.label,
            "key_name": self.key_name,
        }


@dataclass
class LauncherSettings:
    """Settings loaded from the optional YAML file and environment."""

    launch: LaunchConfig = field(default_factory=LaunchConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    aws: AWSConfig = field(default_factory=AWSConfig)

    # Interactive prompts
    max_prompt_attempts: int = 3

    # Extra or overriding image table rows, region -> 4 image ids
    images: Dict[str, List[str]] = field(default_factory=dict)

    skip_validation: bool = False
    log_level: LogLevel = LogLevel.INFO
    log_file: Optional[str] = None

    def validate(self) -> List[str]:
        """Validate settings and return list of errors."""
        errors = []

        if self.polling.interval_seconds < 0:
            errors.append("Poll interval must not be negative")

        if self.polling.max_attempts is not None and self.polling.max_attempts <= 0:
            errors.append("Max poll attempts must be positive")

        if self.polling.timeout_seconds is not None and self.polling.timeout_seconds <= 0:
            errors.append("Poll timeout must be positive")

        if self.max_prompt_attempts <= 0:
            errors.append("Max prompt attempts must be positive")

        for region, row in self.images.items():
            if not isinstance(row, (list, tuple)) or len(row) != 4:
                errors.append(f"Image table for {region} must list exactly 4 images")
            elif len(set(row)) != 4:
                errors.append(f"Image table for {region} has duplicate images")

        return errors
