"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures operation-scoped metadata that should be included with all
    instrumentation events, so a reconciliation run can be followed across
    every repository call it makes.

    Attributes:
        request_id: Unique identifier for the current run/operation.
        backend: Name of the storage backend serving the call ("fake", "op").
        resource: Address of the declarative resource being reconciled.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="run-123", backend="op")
        probe = DefaultOpCliRepositoryProbe().with_context(context)
    """

    request_id: str | None = None
    backend: str | None = None
    resource: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.backend is not None:
            result["backend"] = self.backend
        if self.resource is not None:
            result["resource"] = self.resource
        result.update(self.extra)
        return result

    def with_resource(self, resource: str) -> ObservationContext:
        """Create a new context with the resource address set."""
        return ObservationContext(
            request_id=self.request_id,
            backend=self.backend,
            resource=resource,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        new_extra = {**self.extra, **kwargs}
        return ObservationContext(
            request_id=self.request_id,
            backend=self.backend,
            resource=self.resource,
            extra=new_extra,
        )
