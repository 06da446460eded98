"""Domain models for daily work sessions."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from shift_ledger.domain.reservations import Reservation


@dataclass(frozen=True)
class Settlement:
    """Frozen totals computed when a session closes."""

    count: int
    revenue: Decimal


@dataclass(frozen=True)
class WorkSession:
    """A worker's accounting period for one calendar day."""

    id: UUID
    worker_id: UUID
    date_key: str
    opened_at: datetime
    closed_at: datetime | None
    total_count: int
    total_revenue: Decimal
    version: int

    @property
    def is_open(self) -> bool:
        """Return True while the session has not been closed."""
        return self.closed_at is None


@dataclass(frozen=True)
class ShiftSummary:
    """Session state plus every reservation of the worker for the day."""

    date_key: str
    session: WorkSession | None
    reservations: list[Reservation]
