"""Core interfaces for the launcher."""

from .provider_interface import IProviderGateway
from .config_interface import IConfigService
from .workflow_interface import ILaunchOrchestrator

__all__ = [
    'IProviderGateway',
    'IConfigService',
    'ILaunchOrchestrator'
]
