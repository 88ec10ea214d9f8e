"""AWS EC2 client implementing the provider gateway."""

from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from .session_manager import AWSSessionManager
from core.interfaces.provider_interface import IProviderGateway
from core.models.instance import InstanceHandle, InstanceStatus
from core.models.region import region_from_zone
from core.utils.logger import get_infrastructure_logger


class EC2Client(IProviderGateway):
    """AWS EC2 client wrapper for the launcher's provider calls."""

    def __init__(
        self,
        session_manager: Optional[AWSSessionManager] = None,
        default_region: str = "us-east-1",
        clients: Optional[Dict[str, Any]] = None,
    ):
        self.session_manager = session_manager or AWSSessionManager()
        self.default_region = default_region
        self.logger = get_infrastructure_logger(__name__)
        self._clients: Dict[str, Any] = dict(clients or {})

    def _client(self, region: str):
        """Get the EC2 client for a region (lazy initialization)."""
        if region not in self._clients:
            self._clients[region] = self.session_manager.get_client("ec2", region)
        return self._clients[region]

    def _handle_error(self, operation: str, error: Exception) -> None:
        """Handle AWS client errors with consistent logging."""
        if isinstance(error, ClientError):
            error_code = error.response["Error"]["Code"]
            self.logger.error(f"{operation} failed: {error_code}")
        else:
            self.logger.error(f"{operation} failed: {str(error)}")
        raise error

    async def list_regions(self) -> List[str]:
        """Describe available AWS regions."""
        try:
            response = self._client(self.default_region).describe_regions()
            return sorted(r["RegionName"] for r in response["Regions"])
        except (ClientError, BotoCoreError) as e:
            self._handle_error("Describe regions", e)

    async def list_zones(self, region: str) -> List[str]:
        """Describe available zones in a region."""
        try:
            response = self._client(region).describe_availability_zones(
                Filters=[{"Name": "state", "Values": ["available"]}]
            )
            return sorted(z["ZoneName"] for z in response["AvailabilityZones"])
        except (ClientError, BotoCoreError) as e:
            self._handle_error("Describe availability zones", e)

    async def list_security_groups(self, region: str) -> List[str]:
        """Describe security group names in a region."""
        try:
            groups = []
            paginator = self._client(region).get_paginator("describe_security_groups")
            for page in paginator.paginate():
                groups.extend(g["GroupName"] for g in page["SecurityGroups"])
            return groups
        except (ClientError, BotoCoreError) as e:
            self._handle_error("Describe security groups", e)

    async def list_key_pairs(self, region: str) -> List[str]:
        """Describe key pair names in a region."""
        try:
            response = self._client(region).describe_key_pairs()
            return [k["KeyName"] for k in response["KeyPairs"]]
        except (ClientError, BotoCoreError) as e:
            self._handle_error("Describe key pairs", e)

    async def import_key_pair(self, region: str, name: str, public_key: bytes) -> str:
        """Import a public key as a key pair."""
        try:
            response = self._client(region).import_key_pair(
                KeyName=name, PublicKeyMaterial=public_key
            )
            self.logger.info(f"Imported key pair {response['KeyName']} in {region}")
            return response["KeyName"]
        except (ClientError, BotoCoreError) as e:
            self._handle_error("Import key pair", e)

    async def create_instance(self, image_id: str, zone: str, security_group: str,
                              instance_type: str, key_name: str) -> InstanceHandle:
        """Run exactly one instance. Never retried."""
        region = region_from_zone(zone)
        try:
            response = self._client(region).run_instances(
                ImageId=image_id,
                InstanceType=instance_type,
                KeyName=key_name,
                SecurityGroups=[security_group],
                Placement={"AvailabilityZone": zone},
                MinCount=1,
                MaxCount=1,
            )
            instance = response["Instances"][0]
            handle = InstanceHandle(
                instance_id=instance["InstanceId"],
                region=region,
                zone=zone,
                image_id=image_id,
                instance_type=instance_type,
            )
            self._update_handle(handle, instance)
            return handle
        except (ClientError, BotoCoreError) as e:
            self._handle_error("Run instances", e)

    async def get_status(self, handle: InstanceHandle) -> InstanceStatus:
        """Refresh the handle from describe_instances and return its status."""
        instance = await self._describe_instance(handle)
        if instance is None:
            # Not visible yet right after run_instances
            handle.status = InstanceStatus.PENDING
        else:
            self._update_handle(handle, instance)
        return handle.status

    async def get_endpoint(self, handle: InstanceHandle) -> str:
        """Return the public DNS name, falling back to the public then private IP."""
        instance = await self._describe_instance(handle)
        if instance is not None:
            self._update_handle(handle, instance)

        endpoint = handle.endpoint
        if not endpoint and instance is not None:
            endpoint = instance.get("PrivateIpAddress")
            if endpoint:
                self.logger.warning(
                    f"Instance {handle.instance_id} has no public address, "
                    f"using private IP"
                )
        return endpoint or ""

    async def _describe_instance(self, handle: InstanceHandle) -> Optional[Dict[str, Any]]:
        """Describe one instance; None while EC2 does not know it yet."""
        try:
            response = self._client(handle.region).describe_instances(
                InstanceIds=[handle.instance_id]
            )
            for reservation in response["Reservations"]:
                for instance in reservation["Instances"]:
                    return instance
            return None
        except ClientError as e:
            if e.response["Error"]["Code"] == "InvalidInstanceID.NotFound":
                self.logger.debug(f"Instance {handle.instance_id} not visible yet")
                return None
            self._handle_error("Describe instances", e)
        except BotoCoreError as e:
            self._handle_error("Describe instances", e)

    def _update_handle(self, handle: InstanceHandle, instance: Dict[str, Any]) -> None:
        """Copy state and addresses from an EC2 instance description."""
        handle.status = InstanceStatus.from_aws(instance.get("State", {}).get("Name"))
        handle.state_reason = instance.get("StateReason", {}).get("Message")
        handle.public_dns = instance.get("PublicDnsName") or None
        handle.public_ip = instance.get("PublicIpAddress") or None
        if instance.get("LaunchTime"):
            handle.launch_time = instance["LaunchTime"]
