"""Region data model."""

from dataclasses import dataclass, field
from typing import List

from core.exceptions import ConfigurationError


def region_from_zone(zone: str) -> str:
    """Derive the region from an availability zone by dropping the zone letter.

    >>> region_from_zone("us-east-1a")
    'us-east-1'
    """
    zone = (zone or "").strip()
    if len(zone) < 2 or not zone[-1].isalpha():
        raise ConfigurationError(f"Invalid availability zone: '{zone}'")
    return zone[:-1]


@dataclass
class RegionInfo:
    """Live view of a region as reported by the provider."""

    name: str
    zones: List[str] = field(default_factory=list)
    security_groups: List[str] = field(default_factory=list)
    key_pairs: List[str] = field(default_factory=list)

    def has_zone(self, zone: str) -> bool:
        return zone in self.zones

    def has_security_group(self, group: str) -> bool:
        return group in self.security_groups

    def has_key_pair(self, key_name: str) -> bool:
        return key_name in self.key_pairs
