"""Domain probe for the file-backed fake repository.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of the fake store: entity changes, lookups
that miss and the lifecycle of the JSON snapshot on disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class FakeRepositoryProbe(Protocol):
    """Domain probe for fake repository operations."""

    def entity_created(self, entity: str, entity_id: str) -> None:
        """Record that an entity was created."""
        ...

    def entity_ensured(self, entity: str, entity_id: str) -> None:
        """Record that an entity was created or updated by an ensure call."""
        ...

    def entity_deleted(self, entity: str, entity_id: str) -> None:
        """Record that an entity was deleted."""
        ...

    def entity_not_found(self, entity: str, key: str) -> None:
        """Record that a lookup for an entity missed."""
        ...

    def duplicate_entity(self, entity: str, key: str) -> None:
        """Record that a create was rejected because the key already exists."""
        ...

    def storage_loaded(self, path: str, entity_counts: dict[str, int]) -> None:
        """Record that a snapshot was loaded from disk."""
        ...

    def storage_load_skipped(self, path: str, reason: str) -> None:
        """Record that no usable snapshot was found and the store starts empty."""
        ...

    def storage_persisted(self, path: str) -> None:
        """Record that the snapshot was written to disk."""
        ...

    def storage_persist_failed(self, path: str, error: str) -> None:
        """Record that writing the snapshot failed."""
        ...

    def with_context(self, context: ObservationContext) -> FakeRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultFakeRepositoryProbe:
    """Default implementation of FakeRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultFakeRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultFakeRepositoryProbe(logger=self._logger, context=context)

    def entity_created(self, entity: str, entity_id: str) -> None:
        self._logger.info(
            "fake_entity_created",
            entity=entity,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def entity_ensured(self, entity: str, entity_id: str) -> None:
        self._logger.info(
            "fake_entity_ensured",
            entity=entity,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def entity_deleted(self, entity: str, entity_id: str) -> None:
        self._logger.info(
            "fake_entity_deleted",
            entity=entity,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def entity_not_found(self, entity: str, key: str) -> None:
        self._logger.debug(
            "fake_entity_not_found",
            entity=entity,
            key=key,
            **self._get_context_kwargs(),
        )

    def duplicate_entity(self, entity: str, key: str) -> None:
        self._logger.warning(
            "fake_duplicate_entity",
            entity=entity,
            key=key,
            **self._get_context_kwargs(),
        )

    def storage_loaded(self, path: str, entity_counts: dict[str, int]) -> None:
        self._logger.info(
            "fake_storage_loaded",
            path=path,
            **entity_counts,
            **self._get_context_kwargs(),
        )

    def storage_load_skipped(self, path: str, reason: str) -> None:
        self._logger.info(
            "fake_storage_load_skipped",
            path=path,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def storage_persisted(self, path: str) -> None:
        self._logger.debug(
            "fake_storage_persisted",
            path=path,
            **self._get_context_kwargs(),
        )

    def storage_persist_failed(self, path: str, error: str) -> None:
        self._logger.error(
            "fake_storage_persist_failed",
            path=path,
            error=error,
            **self._get_context_kwargs(),
        )
