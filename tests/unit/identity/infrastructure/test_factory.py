"""Unit tests for repository selection."""

from unittest.mock import patch

from identity.infrastructure.factory import create_repository
from identity.infrastructure.fake_repository import FakeRepository
from identity.infrastructure.observability import (
    DefaultFakeRepositoryProbe,
    DefaultOpCliRepositoryProbe,
)
from identity.infrastructure.onepassword_cli import OpCliRepository
from infrastructure.settings import OnePasswordSettings


class TestCreateRepository:
    """Tests for create_repository."""

    def test_fake_storage_path_selects_fake_store(self, tmp_path, clean_op_env):
        """A fake storage path always selects the fake store."""
        path = tmp_path / "fake.json"
        settings = OnePasswordSettings(fake_storage_path=str(path), cli_path="op2")

        repository = create_repository(settings)

        assert isinstance(repository, FakeRepository)
        assert repository.path == path

    def test_defaults_to_op_cli(self, clean_op_env):
        """Without a fake path the op CLI store is used."""
        settings = OnePasswordSettings(cli_path="/opt/op")

        repository = create_repository(settings)

        assert isinstance(repository, OpCliRepository)
        assert repository._cli.cli_path == "/opt/op"

    def test_settings_loaded_from_environment(self, tmp_path, clean_op_env):
        """Omitted settings come from the cached environment settings."""
        path = tmp_path / "env.json"
        settings = OnePasswordSettings(fake_storage_path=str(path))

        with patch(
            "identity.infrastructure.factory.get_onepassword_settings",
            return_value=settings,
        ):
            repository = create_repository()

        assert isinstance(repository, FakeRepository)


class TestProbeSelection:
    """Tests for routing probes to the selected backend."""

    def test_op_probe_reaches_op_store(self, clean_op_env, mock_probe):
        """The op probe is used by the op CLI store."""
        fake_probe = object()

        repository = create_repository(
            OnePasswordSettings(), fake_probe=fake_probe, op_probe=mock_probe
        )

        assert repository._probe is mock_probe

    def test_fake_probe_reaches_fake_store(self, tmp_path, clean_op_env, mock_probe):
        """The fake probe is used by the fake store."""
        settings = OnePasswordSettings(fake_storage_path=str(tmp_path / "f.json"))

        repository = create_repository(settings, fake_probe=mock_probe)

        assert repository._probe is mock_probe
        mock_probe.storage_load_skipped.assert_called_once()

    def test_default_probes_name_their_backend(self, tmp_path, clean_op_env):
        """Default probes carry the backend in their observation context."""
        fake = create_repository(
            OnePasswordSettings(fake_storage_path=str(tmp_path / "f.json"))
        )
        op = create_repository(OnePasswordSettings())

        assert isinstance(fake._probe, DefaultFakeRepositoryProbe)
        assert fake._probe._get_context_kwargs() == {"backend": "fake"}
        assert isinstance(op._probe, DefaultOpCliRepositoryProbe)
        assert op._probe._get_context_kwargs() == {"backend": "op"}
