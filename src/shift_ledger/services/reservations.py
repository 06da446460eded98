"""Reservation status state machine."""

import logging
from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from shift_ledger.domain.errors import (
    InvalidTransitionError,
    NotAssignedError,
    NotFoundError,
    TransitionConflictError,
)
from shift_ledger.domain.reservations import Reservation, ReservationStatus
from shift_ledger.services.audit import AuditService
from shift_ledger.services.calendar import BusinessCalendar

_logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: frozenset[tuple[ReservationStatus, ReservationStatus]] = frozenset(
    {
        (ReservationStatus.PENDING, ReservationStatus.ACCEPTED),
        (ReservationStatus.PENDING, ReservationStatus.REJECTED),
        (ReservationStatus.ACCEPTED, ReservationStatus.DONE),
    }
)

SETTLEMENT_STATUSES = frozenset({ReservationStatus.ACCEPTED, ReservationStatus.DONE})


class ReservationRepository(Protocol):
    """Persistence interface for reservations."""

    def find_by_worker_and_date_range(
        self,
        worker_id: UUID,
        start: datetime,
        end: datetime,
        statuses: Collection[ReservationStatus] | None = None,
    ) -> list[Reservation]:
        """Return reservations of a worker scheduled within [start, end]."""

    def get_reservation(self, reservation_id: UUID) -> Reservation | None:
        """Return a reservation by id, if present."""

    def update_status(  # noqa: PLR0913
        self,
        reservation_id: UUID,
        expected_status: ReservationStatus,
        expected_worker_id: UUID | None,
        new_status: ReservationStatus,
        worker_id: UUID | None,
    ) -> Reservation | None:
        """Update status and assignee if both are still the expected ones.

        Returns None when the reservation changed since it was read.
        """

    def list_actionable(self, worker_id: UUID) -> list[Reservation]:
        """Return unassigned pending reservations and the worker's open ones."""


@dataclass
class ReservationLedger:
    """Owns reservation status changes and day-scoped queries."""

    repository: ReservationRepository
    calendar: BusinessCalendar
    audit_service: AuditService | None = None

    def find_for_worker_on_date(
        self,
        worker_id: UUID,
        date_key: str,
        statuses: Collection[ReservationStatus] | None = None,
    ) -> list[Reservation]:
        """Return the worker's reservations scheduled on a business day."""
        start, end = self.calendar.day_bounds(date_key)
        return self.repository.find_by_worker_and_date_range(
            worker_id, start, end, statuses
        )

    def list_worker_queue(self, worker_id: UUID) -> list[Reservation]:
        """Return the reservations a worker can act on, oldest first."""
        reservations = self.repository.list_actionable(worker_id)
        return sorted(reservations, key=lambda reservation: reservation.scheduled_at)

    def transition(
        self, reservation_id: UUID, worker_id: UUID, new_status: ReservationStatus
    ) -> Reservation:
        """Move a reservation to a new status on behalf of a worker."""
        reservation = self.repository.get_reservation(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation not found.")

        if (reservation.status, new_status) not in ALLOWED_TRANSITIONS:
            raise InvalidTransitionError(reservation.status, new_status)

        assignee = reservation.worker_id
        if assignee is not None and assignee != worker_id:
            raise NotAssignedError
        if new_status is ReservationStatus.ACCEPTED and assignee is None:
            assignee = worker_id
        if new_status is ReservationStatus.DONE and assignee is None:
            raise NotAssignedError(
                "Only the assigned worker can complete a reservation."
            )

        updated = self.repository.update_status(
            reservation_id,
            expected_status=reservation.status,
            expected_worker_id=reservation.worker_id,
            new_status=new_status,
            worker_id=assignee,
        )
        if updated is None:
            raise TransitionConflictError

        _logger.info(
            "Reservation %s moved %s -> %s by worker %s",
            reservation_id,
            reservation.status.value,
            new_status.value,
            worker_id,
        )
        if self.audit_service is not None:
            self.audit_service.record_event(
                worker_id=worker_id,
                entity_type="reservation",
                entity_id=reservation_id,
                event_type=new_status.value,
                before=_audit_state(reservation),
                after=_audit_state(updated),
            )
        return updated


def _audit_state(reservation: Reservation) -> dict[str, object]:
    return {
        "status": reservation.status.value,
        "worker_id": str(reservation.worker_id) if reservation.worker_id else None,
    }
