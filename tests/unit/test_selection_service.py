"""Unit tests for interactive parameter selection."""

import io

import pytest

from core.exceptions import ConfigurationError, InvalidChoiceError, UnsupportedRegionError
from core.models.config import Architecture, LaunchConfig, StorageType
from core.services.image_catalog import ImageCatalog
from core.services.key_pair_service import KeyPairService
from core.services.selection_service import ParameterSelector, parse_choice
from core.utils.prompt import ConsolePrompter
from tests.conftest import FakeGateway


def make_selector(gateway, prompter, max_attempts=3, hostname="builder-host"):
    key_service = KeyPairService(gateway, prompter, hostname_func=lambda: hostname)
    return ParameterSelector(gateway, prompter, key_service, max_attempts=max_attempts)


class TestParseChoice:
    """Test cases for menu answer parsing."""

    def test_valid(self):
        assert parse_choice("2", 1, 3) == 2
        assert parse_choice(" 0 ", 0, 3) == 0

    @pytest.mark.parametrize("answer", ["", "abc", "1.5", "0", "4", "-1"])
    def test_invalid(self, answer):
        with pytest.raises(InvalidChoiceError):
            parse_choice(answer, 1, 3)


class TestParameterSelector:
    """Test cases for ParameterSelector."""

    @pytest.mark.asyncio
    async def test_full_selection(self, gateway, make_prompter):
        """Every step stores its answer; storage does not overwrite architecture."""
        prompter = make_prompter(["2", "1", "2", "2", "2", "2", "1"])
        selector = make_selector(gateway, prompter)

        config = await selector.select(LaunchConfig())

        assert config.zone == "us-east-1a"
        assert config.region == "us-east-1"
        assert config.security_group == "web"
        assert config.instance_type == "m1.small"
        assert config.architecture == Architecture.I386
        assert config.storage_type == StorageType.INSTANCE_STORE
        assert config.key_name == "mykey"

    @pytest.mark.asyncio
    async def test_choices_are_scoped_by_region(self, gateway, make_prompter):
        prompter = make_prompter(["1", "2", "1", "1", "1", "1", "1"])
        selector = make_selector(gateway, prompter)

        config = await selector.select(LaunchConfig())

        assert config.zone == "eu-west-1b"
        assert [c for c in gateway.calls if c[0] != "list_regions"] == [
            ("list_zones", "eu-west-1"),
            ("list_security_groups", "eu-west-1"),
            ("list_key_pairs", "eu-west-1"),
        ]

    @pytest.mark.asyncio
    async def test_defaults_are_not_mutated(self, gateway, make_prompter):
        defaults = LaunchConfig(key_name="original")
        prompter = make_prompter(["2", "2", "1", "1", "1", "1", "2"])

        config = await make_selector(gateway, prompter).select(defaults)

        assert config.key_name == "other"
        assert defaults.key_name == "original"
        assert defaults.zone == "us-east-1a"

    @pytest.mark.asyncio
    async def test_out_of_range_answer_is_asked_again(self, gateway, make_prompter):
        prompter = make_prompter(["9", "two", "2", "1", "1", "1", "1", "1", "1"])
        selector = make_selector(gateway, prompter)

        config = await selector.select(LaunchConfig())

        assert config.zone == "us-east-1a"
        assert "Invalid choice '9'" in prompter.stream.getvalue()

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, gateway, make_prompter):
        prompter = make_prompter(["0", "3", "x"])
        selector = make_selector(gateway, prompter, max_attempts=3)

        with pytest.raises(InvalidChoiceError):
            await selector.select(LaunchConfig())

        assert gateway.count("list_zones") == 0

    @pytest.mark.asyncio
    async def test_no_zones_available(self, make_prompter):
        gateway = FakeGateway(regions=["us-east-1"], zones={"us-east-1": []})
        selector = make_selector(gateway, make_prompter(["1"]))

        with pytest.raises(ConfigurationError, match="No availability zones"):
            await selector.select(LaunchConfig())

    @pytest.mark.asyncio
    async def test_no_regions_available(self, make_prompter):
        gateway = FakeGateway()
        gateway.regions = []
        selector = make_selector(gateway, make_prompter([]))

        with pytest.raises(InvalidChoiceError, match="No choices available"):
            await selector.select(LaunchConfig())

    @pytest.mark.asyncio
    async def test_key_import_uses_defaults(self, gateway, make_prompter, tmp_path, monkeypatch):
        """Blank name and path fall back to the hostname and ~/.ssh/id_rsa.pub."""
        monkeypatch.setenv("HOME", str(tmp_path))
        ssh_dir = tmp_path / ".ssh"
        ssh_dir.mkdir()
        (ssh_dir / "id_rsa.pub").write_bytes(b"ssh-rsa AAAAB3NzaC1yc2E test@builder\n")

        prompter = make_prompter(["2", "1", "1", "1", "1", "1", "0", "", ""])
        selector = make_selector(gateway, prompter, hostname="builder-host")

        config = await selector.select(LaunchConfig())

        assert config.key_name == "builder-host"
        assert gateway.imported == [
            ("us-east-1", "builder-host", b"ssh-rsa AAAAB3NzaC1yc2E test@builder\n")
        ]
        output = prompter.stream.getvalue()
        assert "[0] Upload new key" in output
        assert "Key name (builder-host)? " in output
        assert "Key location (~/.ssh/id_rsa.pub)? " in output

    @pytest.mark.asyncio
    async def test_key_out_of_range(self, gateway, make_prompter):
        prompter = make_prompter(["2", "1", "1", "1", "1", "1", "3"])
        selector = make_selector(gateway, prompter, max_attempts=1)

        with pytest.raises(InvalidChoiceError):
            await selector.select(LaunchConfig())

        assert gateway.imported == []

    def test_choose_lists_options_one_based(self, gateway, make_prompter):
        prompter = make_prompter(["2"])
        selector = make_selector(gateway, prompter)

        assert selector.choose("Pick one", ["a", "b"]) == "b"
        assert "[1] a\n[2] b\n" in prompter.stream.getvalue()
        assert "[1-2]? " in prompter.stream.getvalue()


class TestRegionScope:
    """Regions without images are never offered."""

    @pytest.mark.asyncio
    async def test_regions_without_images_are_hidden(self, make_prompter):
        gateway = FakeGateway(regions=["eu-central-1", "us-east-1"])
        prompter = make_prompter(["1", "1", "1", "1", "1", "1", "1"])

        config = await make_selector(gateway, prompter).select(LaunchConfig())

        assert config.region == "us-east-1"
        output = prompter.stream.getvalue()
        assert "eu-central-1" not in output
        assert "[1] us-east-1\n" in output

    @pytest.mark.asyncio
    async def test_unsupported_region_fails_before_key_import(self, make_prompter, tmp_path):
        """No key is imported when the only region has no image table."""
        key_file = tmp_path / "deploy.pub"
        key_file.write_bytes(b"ssh-rsa AAAAB3NzaC1yc2E deploy\n")
        gateway = FakeGateway(
            regions=["eu-central-1"],
            zones={"eu-central-1": ["eu-central-1a"]},
            groups={"eu-central-1": ["default"]},
            keys={"eu-central-1": []},
        )
        prompter = make_prompter(["1", "1", "1", "1", "1", "1", "0", "deploy", str(key_file)])

        with pytest.raises(UnsupportedRegionError, match="eu-central-1"):
            await make_selector(gateway, prompter).select(LaunchConfig())

        assert gateway.imported == []
        assert [c[0] for c in gateway.calls] == ["list_regions"]

    @pytest.mark.asyncio
    async def test_catalog_overrides_extend_the_menu(self, make_prompter):
        gateway = FakeGateway(
            regions=["eu-central-1"],
            zones={"eu-central-1": ["eu-central-1a"]},
            groups={"eu-central-1": ["default"]},
            keys={"eu-central-1": ["mykey"]},
        )
        catalog = ImageCatalog({"eu-central-1": ["ami-1", "ami-2", "ami-3", "ami-4"]})
        key_service = KeyPairService(gateway, make_prompter([]))
        selector = ParameterSelector(
            gateway,
            make_prompter(["1", "1", "1", "1", "1", "1", "1"]),
            key_service,
            image_catalog=catalog,
        )

        config = await selector.select(LaunchConfig())

        assert config.zone == "eu-central-1a"
        assert config.key_name == "mykey"


class TestEndOfInput:
    """Closed stdin is a configuration error, not a traceback."""

    @pytest.mark.asyncio
    async def test_eof_while_selecting(self, gateway):
        def closed_stdin(_prompt):
            raise EOFError

        prompter = ConsolePrompter(input_func=closed_stdin, stream=io.StringIO())

        with pytest.raises(ConfigurationError, match="end of input"):
            await make_selector(gateway, prompter).select(LaunchConfig())

        assert gateway.imported == []
