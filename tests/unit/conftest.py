"""Unit test fixtures shared across bounded contexts."""

from __future__ import annotations

from typing import Sequence
from unittest.mock import MagicMock

import pytest

from identity.infrastructure.onepassword_cli.runner import CommandResult


class ScriptedRunner:
    """OpCliRunner double that replays queued results and records calls.

    Results are consumed in order; once the queue is empty every further
    call succeeds with empty output.
    """

    def __init__(self, *results: CommandResult) -> None:
        self.calls: list[list[str]] = []
        self._results = list(results)

    def queue(self, *results: CommandResult) -> ScriptedRunner:
        self._results.extend(results)
        return self

    def run(self, args: Sequence[str]) -> CommandResult:
        self.calls.append(list(args))
        if self._results:
            return self._results.pop(0)
        return CommandResult(returncode=0)


@pytest.fixture
def runner():
    """Provide an empty scripted op runner."""
    return ScriptedRunner()


@pytest.fixture
def mock_probe():
    """Provide a mock repository probe."""
    return MagicMock()


@pytest.fixture
def clean_op_env(monkeypatch):
    """Remove storage backend variables inherited from the environment."""
    monkeypatch.delenv("OP_CLI_PATH", raising=False)
    monkeypatch.delenv("OP_FAKE_STORAGE_PATH", raising=False)
    return monkeypatch
