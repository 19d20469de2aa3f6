"""Ports (interfaces) for the identity bounded context.

Ports define the contracts for repositories without specifying
implementation details. Both storage backends implement the same
protocol and are chosen once, at construction time.
"""

from identity.ports.exceptions import (
    AlreadyExistsError,
    BackendError,
    CommandFailedError,
    InvalidCommandOutputError,
    InvalidIDError,
    NotFoundError,
    PersistenceError,
    RepositoryError,
)
from identity.ports.repositories import IRepository

__all__ = [
    "AlreadyExistsError",
    "BackendError",
    "CommandFailedError",
    "IRepository",
    "InvalidCommandOutputError",
    "InvalidIDError",
    "NotFoundError",
    "PersistenceError",
    "RepositoryError",
]
