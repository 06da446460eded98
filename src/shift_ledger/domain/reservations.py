"""Domain models for reservations."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class ReservationStatus(StrEnum):
    """Worker-facing reservation lifecycle."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DONE = "done"


@dataclass(frozen=True)
class LineItem:
    """One booked service and how many times it was booked."""

    service_name: str
    quantity: int | None = None


@dataclass(frozen=True)
class Reservation:
    """A booked job."""

    id: UUID
    worker_id: UUID | None
    scheduled_at: datetime
    status: ReservationStatus
    line_items: tuple[LineItem, ...] = ()
