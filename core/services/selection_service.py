"""Interactive, step-by-step selection of launch parameters.

The steps run in a fixed order because later choices are scoped by
earlier ones: the region decides which zones, security groups and key
pairs are offered.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Sequence, TypeVar

from core.exceptions import ConfigurationError, InvalidChoiceError, UnsupportedRegionError
from core.interfaces.provider_interface import IProviderGateway
from core.models.config import INSTANCE_TYPES, Architecture, LaunchConfig, StorageType
from core.services.image_catalog import ImageCatalog
from core.services.key_pair_service import KeyPairService
from core.utils.prompt import ConsolePrompter

T = TypeVar("T")


class SelectionStep(Enum):
    """Interactive selection states, in visiting order."""
    REGION = "region"
    ZONE = "zone"
    SECURITY_GROUP = "security_group"
    INSTANCE_TYPE = "instance_type"
    ARCHITECTURE = "architecture"
    STORAGE_TYPE = "storage_type"
    KEY = "key"
    RESOLVED = "resolved"


SELECTION_ORDER = (
    SelectionStep.REGION,
    SelectionStep.ZONE,
    SelectionStep.SECURITY_GROUP,
    SelectionStep.INSTANCE_TYPE,
    SelectionStep.ARCHITECTURE,
    SelectionStep.STORAGE_TYPE,
    SelectionStep.KEY,
)


@dataclass
class SelectionState:
    """In-progress configuration owned by one selection run."""
    config: LaunchConfig
    region: Optional[str] = None
    step: SelectionStep = SelectionStep.REGION


def parse_choice(answer: str, low: int, high: int) -> int:
    """Parse a menu answer and check it lies within [low, high]."""
    try:
        choice = int(answer.strip())
    except (AttributeError, ValueError):
        raise InvalidChoiceError(answer, low, high) from None
    if choice < low or choice > high:
        raise InvalidChoiceError(answer, low, high)
    return choice


class ParameterSelector:
    """Walks the operator through region, zone, group, type, arch, store and key."""

    def __init__(
        self,
        gateway: IProviderGateway,
        prompter: Optional[ConsolePrompter] = None,
        key_pair_service: Optional[KeyPairService] = None,
        max_attempts: int = 3,
        image_catalog: Optional[ImageCatalog] = None,
    ):
        self.gateway = gateway
        self.prompter = prompter or ConsolePrompter()
        self.key_pair_service = key_pair_service or KeyPairService(gateway, self.prompter)
        self.max_attempts = max_attempts
        self.image_catalog = image_catalog or ImageCatalog()
        self.logger = logging.getLogger(__name__)
        self._handlers: Dict[SelectionStep, Callable[[SelectionState], Awaitable[None]]] = {
            SelectionStep.REGION: self._select_region,
            SelectionStep.ZONE: self._select_zone,
            SelectionStep.SECURITY_GROUP: self._select_security_group,
            SelectionStep.INSTANCE_TYPE: self._select_instance_type,
            SelectionStep.ARCHITECTURE: self._select_architecture,
            SelectionStep.STORAGE_TYPE: self._select_storage_type,
            SelectionStep.KEY: self._select_key,
        }

    async def select(self, defaults: LaunchConfig) -> LaunchConfig:
        """Run every selection step and return the resolved configuration."""
        state = SelectionState(config=replace(defaults))

        for step in SELECTION_ORDER:
            state.step = step
            self.logger.debug(f"Selection step: {step.value}")
            await self._handlers[step](state)

        state.step = SelectionStep.RESOLVED
        self.logger.info(f"Resolved launch configuration: {state.config.to_dict()}")
        return state.config

    def _read_choice(self, low: int, high: int) -> int:
        """Prompt until a valid number is entered or attempts run out."""
        if high < low:
            raise InvalidChoiceError("", low, high)

        for attempt in range(1, self.max_attempts + 1):
            answer = self.prompter.ask(f"[{low}-{high}]? ")
            try:
                return parse_choice(answer, low, high)
            except InvalidChoiceError as e:
                if attempt == self.max_attempts:
                    raise
                self.prompter.say(str(e))

    def choose(self, question: str, options: Sequence[T],
               labels: Optional[Sequence[str]] = None) -> T:
        """Show a 1-based numbered list and return the chosen option."""
        labels = list(labels) if labels is not None else [str(o) for o in options]

        self.prompter.say(question)
        for i, label in enumerate(labels, start=1):
            self.prompter.say(f"[{i}] {label}")

        choice = self._read_choice(1, len(options))
        return options[choice - 1]

    async def _select_region(self, state: SelectionState) -> None:
        """Offer only regions the image catalog can serve.

        An unusable region must fail here, before the key step can import
        anything.
        """
        regions = await self.gateway.list_regions()
        supported = [r for r in regions if self.image_catalog.is_supported(r)]
        if regions and not supported:
            raise UnsupportedRegionError(
                ", ".join(regions), self.image_catalog.supported_regions()
            )
        if len(supported) < len(regions):
            self.logger.debug(
                f"Skipping regions without images: {sorted(set(regions) - set(supported))}"
            )
        state.region = self.choose("Which region do you want to deploy in?", supported)

    async def _select_zone(self, state: SelectionState) -> None:
        zones = await self.gateway.list_zones(state.region)
        if not zones:
            raise ConfigurationError(f"No availability zones available in {state.region}")
        state.config.zone = self.choose(
            f"Which availability zone in {state.region}?", zones
        )

    async def _select_security_group(self, state: SelectionState) -> None:
        groups = await self.gateway.list_security_groups(state.region)
        if not groups:
            raise ConfigurationError(f"No security groups available in {state.region}")
        state.config.security_group = self.choose(
            "Which security group should the instance belong to?", groups
        )

    async def _select_instance_type(self, state: SelectionState) -> None:
        state.config.instance_type = self.choose(
            "Which instance type would you like to deploy?", INSTANCE_TYPES
        )

    async def _select_architecture(self, state: SelectionState) -> None:
        archs = list(Architecture)
        state.config.architecture = self.choose(
            "Which architecture would you like?", archs, [a.label for a in archs]
        )

    async def _select_storage_type(self, state: SelectionState) -> None:
        stores = list(StorageType)
        state.config.storage_type = self.choose(
            "Which root storage would you like?", stores, [s.label for s in stores]
        )

    async def _select_key(self, state: SelectionState) -> None:
        """Pick an existing key pair, or 0 to import a new one."""
        keys = await self.gateway.list_key_pairs(state.region)

        self.prompter.say("Which security key will you use?")
        self.prompter.say("[0] Upload new key")
        for i, key in enumerate(keys, start=1):
            self.prompter.say(f"[{i}] {key}")

        choice = self._read_choice(0, len(keys))
        if choice == 0:
            state.config.key_name = await self.key_pair_service.prompt_and_import(state.region)
        else:
            state.config.key_name = keys[choice - 1]
