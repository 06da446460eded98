"""Domain models for authenticated principals."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class WorkerPrincipal:
    """Identity resolved from a request credential."""

    id: UUID
    role: str
