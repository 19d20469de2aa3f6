"""Domain exceptions for the identity bounded context.

These exceptions represent errors raised by repository operations. Messages
are descriptive on purpose: lookups served by the op CLI surface the tool's
own wording, so callers should not rely on the exception type alone to tell
a missing entity apart from a transport failure.
"""

from shared_kernel.composite_id import InvalidIDError


class RepositoryError(Exception):
    """Base exception for repository operations."""

    pass


class NotFoundError(RepositoryError):
    """Raised when a lookup, ensure or delete targets a missing entity."""

    pass


class AlreadyExistsError(RepositoryError):
    """Raised when creating an entity whose natural key already resolves.

    The organization backend itself allows duplicate group and vault names,
    so uniqueness is enforced here with a lookup before every create.
    """

    pass


class BackendError(RepositoryError):
    """Base exception for failures talking to the organization backend."""

    pass


class CommandFailedError(BackendError):
    """Raised when the op CLI exits non-zero or cannot be started."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class InvalidCommandOutputError(BackendError):
    """Raised when op CLI stdout cannot be parsed into the expected shape."""

    pass


class PersistenceError(RepositoryError):
    """Raised when the fake store cannot write its snapshot to disk.

    The in-memory change that triggered the write is not rolled back.
    """

    pass


__all__ = [
    "AlreadyExistsError",
    "BackendError",
    "CommandFailedError",
    "InvalidCommandOutputError",
    "InvalidIDError",
    "NotFoundError",
    "PersistenceError",
    "RepositoryError",
]
