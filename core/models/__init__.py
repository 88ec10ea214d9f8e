"""Core data models for the launcher."""

from .instance import InstanceHandle, InstanceStatus, TerminalState
from .config import (
    INSTANCE_TYPES,
    Architecture,
    AWSConfig,
    LaunchConfig,
    LauncherSettings,
    PollingConfig,
    StorageType,
)
from .region import RegionInfo, region_from_zone
from .launch import LaunchResult, LaunchStatus

__all__ = [
    'InstanceHandle',
    'InstanceStatus',
    'TerminalState',
    'INSTANCE_TYPES',
    'Architecture',
    'AWSConfig',
    'LaunchConfig',
    'LauncherSettings',
    'PollingConfig',
    'StorageType',
    'RegionInfo',
    'region_from_zone',
    'LaunchResult',
    'LaunchStatus'
]
