"""Cloud provider gateway interface."""

from abc import ABC, abstractmethod
from typing import List
from core.models.instance import InstanceHandle, InstanceStatus


class IProviderGateway(ABC):
    """Interface for the provider calls the launcher depends on."""

    @abstractmethod
    async def list_regions(self) -> List[str]:
        """List the regions available to the account.

        Returns:
            Region names
        """
        pass

    @abstractmethod
    async def list_zones(self, region: str) -> List[str]:
        """List availability zones in a region.

        Args:
            region: Region name

        Returns:
            Zone names
        """
        pass

    @abstractmethod
    async def list_security_groups(self, region: str) -> List[str]:
        """List security group names in a region.

        Args:
            region: Region name

        Returns:
            Security group names
        """
        pass

    @abstractmethod
    async def list_key_pairs(self, region: str) -> List[str]:
        """List key pair names registered in a region.

        Args:
            region: Region name

        Returns:
            Key pair names
        """
        pass

    @abstractmethod
    async def import_key_pair(self, region: str, name: str, public_key: bytes) -> str:
        """Register a public key with the provider.

        Args:
            region: Region to import the key into
            name: Key pair name
            public_key: Public key material (OpenSSH format)

        Returns:
            Name of the imported key pair
        """
        pass

    @abstractmethod
    async def create_instance(self, image_id: str, zone: str, security_group: str,
                              instance_type: str, key_name: str) -> InstanceHandle:
        """Create exactly one instance.

        Args:
            image_id: Machine image to boot
            zone: Availability zone to place the instance in
            security_group: Security group name
            instance_type: Instance size class
            key_name: Key pair used for login

        Returns:
            InstanceHandle for the new instance
        """
        pass

    @abstractmethod
    async def get_status(self, handle: InstanceHandle) -> InstanceStatus:
        """Get the current status of an instance.

        Args:
            handle: The instance to check

        Returns:
            Current InstanceStatus
        """
        pass

    @abstractmethod
    async def get_endpoint(self, handle: InstanceHandle) -> str:
        """Get the public address of a running instance.

        Args:
            handle: The instance to look up

        Returns:
            Public DNS name, or public IP when no DNS name is assigned
        """
        pass
