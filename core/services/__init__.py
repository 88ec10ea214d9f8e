"""Core services for the launcher."""

from .config_service import ConfigService
from .image_catalog import ImageCatalog
from .instance_waiter import InstanceWaiter
from .key_pair_service import KeyPairService
from .selection_service import ParameterSelector

__all__ = [
    'ConfigService',
    'ImageCatalog',
    'InstanceWaiter',
    'KeyPairService',
    'ParameterSelector'
]
