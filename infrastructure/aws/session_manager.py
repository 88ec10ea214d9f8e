"""AWS session manager"""

import boto3
from typing import Dict, Optional
from core.models.config import AWSConfig
from core.utils.logger import get_infrastructure_logger


class AWSSessionManager:
    """Creates boto3 sessions from explicitly supplied credentials."""

    def __init__(self, aws_config: Optional[AWSConfig] = None):
        self.aws_config = aws_config or AWSConfig()
        self.logger = get_infrastructure_logger(__name__)
        self._sessions: Dict[str, boto3.Session] = {}

    def get_session(self, region: str) -> boto3.Session:
        """Get (and cache) a session for a region."""
        if region not in self._sessions:
            self._sessions[region] = self._create_session(region)
        return self._sessions[region]

    def _create_session(self, region: str) -> boto3.Session:
        config = self.aws_config

        if config.has_static_credentials:
            self.logger.debug(f"Using static credentials for {region}")
            return boto3.Session(
                aws_access_key_id=config.access_key_id,
                aws_secret_access_key=config.secret_access_key,
                aws_session_token=config.session_token,
                region_name=region,
            )

        if config.profile_name:
            self.logger.debug(f"Using profile {config.profile_name} for {region}")
            return boto3.Session(profile_name=config.profile_name, region_name=region)

        self.logger.warning("No credentials provided, using default session")
        return boto3.Session(region_name=region)

    def get_client(self, service_name: str, region: str):
        """Create a service client for a region."""
        return self.get_session(region).client(service_name, region_name=region)
