"""Machine image lookup by region, architecture and root storage."""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from core.exceptions import ConfigurationError, UnsupportedRegionError
from core.models.config import Architecture, StorageType


# Ubuntu 12.04 images by region.
# Each row is ordered 64-bit ebs, 64-bit instance, 32-bit ebs, 32-bit instance.
UBUNTU_AMIS: Dict[str, Tuple[str, str, str, str]] = {
    "ap-northeast-1": ("ami-c641f2c7", "ami-ac41f2ad", "ami-c441f2c5", "ami-4041f241"),
    "ap-southeast-1": ("ami-acf6b0fe", "ami-a6f6b0f4", "ami-aaf6b0f8", "ami-b8f6b0ea"),
    "eu-west-1": ("ami-ab9491df", "ami-b39491c7", "ami-a99491dd", "ami-d19491a5"),
    "sa-east-1": ("ami-5c03dd41", "ami-2a03dd37", "ami-2203dd3f", "ami-2e03dd33"),
    "us-east-1": ("ami-82fa58eb", "ami-eafa5883", "ami-8cfa58e5", "ami-4efa5827"),
    "us-west-1": ("ami-5965401c", "ami-bfe5bffa", "ami-5d654018", "ami-a7e5bfe2"),
    "us-west-2": ("ami-4438b474", "ami-5238b462", "ami-4038b470", "ami-6038b450"),
}


def image_index(architecture: Architecture, storage_type: StorageType) -> int:
    """Position of an image within a region's row: arch * 2 + store."""
    return architecture.index * 2 + storage_type.index


class ImageCatalog:
    """Static (region, architecture, storage type) -> image id table."""

    def __init__(self, overrides: Optional[Mapping[str, Sequence[str]]] = None):
        self.logger = logging.getLogger(__name__)
        self._table: Dict[str, Tuple[str, ...]] = dict(UBUNTU_AMIS)
        for region, row in (overrides or {}).items():
            self._table[region] = self._check_row(region, row)

    @staticmethod
    def _check_row(region: str, row: Sequence[str]) -> Tuple[str, ...]:
        row = tuple(row)
        if len(row) != 4 or not all(row):
            raise ConfigurationError(
                f"Image table for {region} must list exactly 4 images"
            )
        if len(set(row)) != 4:
            raise ConfigurationError(f"Image table for {region} has duplicate images")
        return row

    def supported_regions(self) -> List[str]:
        return sorted(self._table)

    def is_supported(self, region: str) -> bool:
        return region in self._table

    def lookup(self, region: str, architecture: Architecture,
               storage_type: StorageType) -> str:
        """Return the image id for a region, architecture and storage type.

        Raises:
            UnsupportedRegionError: If the region has no image table
        """
        row = self._table.get(region)
        if row is None:
            raise UnsupportedRegionError(region, self.supported_regions())

        image_id = row[image_index(architecture, storage_type)]
        self.logger.debug(
            f"Resolved {image_id} for {region} {architecture.label} {storage_type.label}"
        )
        return image_id
