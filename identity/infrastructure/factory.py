"""Repository construction from settings."""

from __future__ import annotations

from identity.infrastructure.fake_repository import FakeRepository
from identity.infrastructure.observability import (
    DefaultFakeRepositoryProbe,
    DefaultOpCliRepositoryProbe,
    FakeRepositoryProbe,
    OpCliRepositoryProbe,
)
from identity.infrastructure.onepassword_cli import OpCli, OpCliRepository
from identity.ports.repositories import IRepository
from infrastructure.observability import ObservationContext
from infrastructure.settings import OnePasswordSettings, get_onepassword_settings


def create_repository(
    settings: OnePasswordSettings | None = None,
    fake_probe: FakeRepositoryProbe | None = None,
    op_probe: OpCliRepositoryProbe | None = None,
) -> IRepository:
    """Create the repository the settings select.

    A configured fake storage path always wins over the op CLI. Each backend
    takes its own probe; the probe of the backend not selected is unused.
    Default probes are bound to a context naming the backend.

    Args:
        settings: Backend settings; loaded from the environment when omitted
        fake_probe: Optional probe for the fake store
        op_probe: Optional probe for the op CLI store

    Returns:
        A FakeRepository or an OpCliRepository
    """
    settings = settings or get_onepassword_settings()

    if settings.use_fake_storage:
        probe = fake_probe or DefaultFakeRepositoryProbe().with_context(
            ObservationContext(backend="fake")
        )
        return FakeRepository(settings.fake_storage_path, probe=probe)

    return OpCliRepository(
        OpCli(settings.cli_path),
        probe=op_probe
        or DefaultOpCliRepositoryProbe().with_context(ObservationContext(backend="op")),
    )
