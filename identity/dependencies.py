"""Dependency wiring for the identity bounded context.

Composes application settings, logging and the selected storage backend
into the repository callers use.
"""

from functools import lru_cache

from identity.infrastructure.factory import create_repository
from identity.ports.repositories import IRepository
from infrastructure.logging import configure_logging
from infrastructure.settings import Settings, get_settings


def bootstrap(settings: Settings | None = None) -> IRepository:
    """Configure logging and build the repository.

    Args:
        settings: Application settings; loaded from the environment when omitted
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    return create_repository(settings.onepassword)


@lru_cache
def get_repository() -> IRepository:
    """Get the process-wide repository, bootstrapping it on first use."""
    return bootstrap()
