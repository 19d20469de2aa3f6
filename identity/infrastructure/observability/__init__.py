"""Domain-Oriented Observability for identity infrastructure.

Probes for repository operations following Domain-Oriented Observability patterns.
"""

from identity.infrastructure.observability.fake_repository_probe import (
    DefaultFakeRepositoryProbe,
    FakeRepositoryProbe,
)
from identity.infrastructure.observability.op_cli_probe import (
    DefaultOpCliRepositoryProbe,
    OpCliRepositoryProbe,
)

__all__ = [
    "DefaultFakeRepositoryProbe",
    "DefaultOpCliRepositoryProbe",
    "FakeRepositoryProbe",
    "OpCliRepositoryProbe",
]
