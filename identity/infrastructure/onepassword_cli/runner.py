"""Subprocess runner for the op CLI.

The runner is the only place that starts processes. Repositories depend on
the narrow OpCliRunner protocol so tests can substitute a scripted fake and
assert exactly which commands were issued, and in which order.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single op invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Whether the command exited successfully."""
        return self.returncode == 0


@runtime_checkable
class OpCliRunner(Protocol):
    """Capability to run one op command and wait for it to finish."""

    def run(self, args: Sequence[str]) -> CommandResult:
        """Run op with the given arguments.

        Raises:
            OSError: If the process could not be started
        """
        ...


class OpCli:
    """Runs the op binary as a subprocess.

    The op session (service account token or signed-in account) is taken
    from the environment the process inherits.
    """

    def __init__(self, cli_path: str = "op", env: Mapping[str, str] | None = None):
        """Initialize the runner.

        Args:
            cli_path: Name or path of the op binary
            env: Extra environment variables layered over os.environ
        """
        self._cli_path = cli_path
        self._env = dict(env) if env else {}

    @property
    def cli_path(self) -> str:
        return self._cli_path

    def run(self, args: Sequence[str]) -> CommandResult:
        env = {**os.environ, **self._env} if self._env else None
        proc = subprocess.run(
            [self._cli_path, *args],
            capture_output=True,
            text=True,
            check=False,
            env=env,
        )
        return CommandResult(
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
