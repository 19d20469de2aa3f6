"""op CLI backend for the identity repositories."""

from identity.infrastructure.onepassword_cli.command import OpCommand
from identity.infrastructure.onepassword_cli.repository import OpCliRepository
from identity.infrastructure.onepassword_cli.runner import (
    CommandResult,
    OpCli,
    OpCliRunner,
)

__all__ = [
    "CommandResult",
    "OpCli",
    "OpCliRepository",
    "OpCliRunner",
    "OpCommand",
]
