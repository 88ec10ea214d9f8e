"""Key pair import for the interactive key selection."""

import logging
import os
import socket
from pathlib import Path
from typing import Callable, Optional

from core.exceptions import KeyImportError
from core.interfaces.provider_interface import IProviderGateway
from core.utils.prompt import ConsolePrompter

DEFAULT_PUBLIC_KEY_PATH = "~/.ssh/id_rsa.pub"


class KeyPairService:
    """Imports a local public key as a provider key pair."""

    def __init__(
        self,
        gateway: IProviderGateway,
        prompter: Optional[ConsolePrompter] = None,
        hostname_func: Callable[[], str] = socket.gethostname,
    ):
        self.gateway = gateway
        self.prompter = prompter or ConsolePrompter()
        self._hostname = hostname_func
        self.logger = logging.getLogger(__name__)

    def default_key_name(self) -> str:
        return self._hostname().strip()

    def read_public_key(self, key_path: str) -> bytes:
        """Read public key material from disk, expanding ``~``."""
        path = Path(os.path.expanduser(key_path))
        try:
            material = path.read_bytes()
        except OSError as e:
            raise KeyImportError(f"Cannot read public key {path}: {e.strerror or e}") from e

        if not material.strip():
            raise KeyImportError(f"Public key file {path} is empty")
        return material

    async def import_key(self, region: str, key_name: Optional[str] = None,
                         key_path: Optional[str] = None) -> str:
        """Import a key pair, defaulting the name to the hostname and the
        path to the conventional SSH public key."""
        key_name = key_name or self.default_key_name()
        key_path = key_path or DEFAULT_PUBLIC_KEY_PATH

        material = self.read_public_key(key_path)
        self.logger.info(f"Importing key pair '{key_name}' from {key_path} into {region}")
        return await self.gateway.import_key_pair(region, key_name, material)

    async def prompt_and_import(self, region: str) -> str:
        """Ask for key name and location, then import."""
        default_name = self.default_key_name()
        key_name = self.prompter.ask(f"Key name ({default_name})? ") or default_name
        key_path = (
            self.prompter.ask(f"Key location ({DEFAULT_PUBLIC_KEY_PATH})? ")
            or DEFAULT_PUBLIC_KEY_PATH
        )
        return await self.import_key(region, key_name, key_path)
