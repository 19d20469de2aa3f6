"""Domain probe for the op CLI repository.

Following Domain-Oriented Observability patterns, this probe captures
every op invocation and the two places where the CLI store deliberately
issues more than one command for a single repository call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Sequence

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class OpCliRepositoryProbe(Protocol):
    """Domain probe for op CLI repository operations."""

    def command_executed(self, args: Sequence[str]) -> None:
        """Record that an op command exited successfully."""
        ...

    def command_failed(self, args: Sequence[str], error: str) -> None:
        """Record that an op command failed or could not be started."""
        ...

    def stale_grant_revoke_ignored(
        self, vault_id: str, subject_id: str, error: str
    ) -> None:
        """Record that revoking a previous grant failed before re-granting."""
        ...

    def membership_role_fixup(self, group_id: str, user_id: str, role: str) -> None:
        """Record that a second grant call is applying a non-default role."""
        ...

    def with_context(self, context: ObservationContext) -> OpCliRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultOpCliRepositoryProbe:
    """Default implementation of OpCliRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultOpCliRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultOpCliRepositoryProbe(logger=self._logger, context=context)

    def command_executed(self, args: Sequence[str]) -> None:
        """Record that an op command exited successfully."""
        self._logger.debug(
            "op_command_executed",
            args=list(args),
            **self._get_context_kwargs(),
        )

    def command_failed(self, args: Sequence[str], error: str) -> None:
        """Record that an op command failed or could not be started."""
        self._logger.warning(
            "op_command_failed",
            args=list(args),
            error=error,
            **self._get_context_kwargs(),
        )

    def stale_grant_revoke_ignored(
        self, vault_id: str, subject_id: str, error: str
    ) -> None:
        """Record that revoking a previous grant failed before re-granting."""
        self._logger.debug(
            "op_stale_grant_revoke_ignored",
            vault_id=vault_id,
            subject_id=subject_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def membership_role_fixup(self, group_id: str, user_id: str, role: str) -> None:
        """Record that a second grant call is applying a non-default role."""
        self._logger.info(
            "op_membership_role_fixup",
            group_id=group_id,
            user_id=user_id,
            role=role,
            **self._get_context_kwargs(),
        )
