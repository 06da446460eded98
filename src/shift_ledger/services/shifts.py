"""Daily work-session lifecycle and end-of-day settlement."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from shift_ledger.domain.errors import AlreadyOpenError, NoOpenSessionError
from shift_ledger.domain.shifts import Settlement, ShiftSummary, WorkSession
from shift_ledger.services.audit import AuditService
from shift_ledger.services.calendar import BusinessCalendar
from shift_ledger.services.pricing import PricingResolver
from shift_ledger.services.reservations import SETTLEMENT_STATUSES, ReservationLedger
from shift_ledger.services.settlement import aggregate, unpriced_services

_logger = logging.getLogger(__name__)


class WorkSessionRepository(Protocol):
    """Persistence interface for work sessions keyed by (worker, day).

    Writes are conditional: they return None instead of overwriting when
    the record changed since it was read.
    """

    def get_session(self, worker_id: UUID, date_key: str) -> WorkSession | None:
        """Return the worker's session for a day, if present."""

    def create_session(
        self, worker_id: UUID, date_key: str, opened_at: datetime
    ) -> WorkSession | None:
        """Insert an open session, or return None if one already exists."""

    def reopen_session(
        self, session_id: UUID, expected_version: int, opened_at: datetime
    ) -> WorkSession | None:
        """Reopen a closed session with zeroed totals."""

    def close_session(
        self,
        session_id: UUID,
        expected_version: int,
        closed_at: datetime,
        settlement: Settlement,
    ) -> WorkSession | None:
        """Close an open session and freeze its totals."""


@dataclass
class SessionManager:
    """Opens, closes and summarises a worker's session for the current day."""

    repository: WorkSessionRepository
    reservation_ledger: ReservationLedger
    pricing_resolver: PricingResolver
    calendar: BusinessCalendar
    audit_service: AuditService | None = None

    def open_session(self, worker_id: UUID) -> WorkSession:
        """Open today's session, reopening it if it was closed earlier."""
        date_key = self.calendar.today_key()
        existing = self.repository.get_session(worker_id, date_key)
        if existing is not None and existing.is_open:
            raise AlreadyOpenError

        now = self.calendar.now()
        if existing is None:
            session = self.repository.create_session(worker_id, date_key, now)
            event_type = "opened"
        else:
            session = self.repository.reopen_session(
                existing.id, existing.version, now
            )
            event_type = "reopened"
        if session is None:
            # Another request opened the day between our read and write.
            raise AlreadyOpenError

        _logger.info(
            "Work session %s for worker %s on %s", event_type, worker_id, date_key
        )
        self._record(worker_id, session, event_type, before=existing)
        return session

    def close_session(self, worker_id: UUID) -> WorkSession:
        """Close today's session and freeze its settlement."""
        date_key = self.calendar.today_key()
        session = self.repository.get_session(worker_id, date_key)
        if session is None or not session.is_open:
            raise NoOpenSessionError

        reservations = self.reservation_ledger.find_for_worker_on_date(
            worker_id, date_key, SETTLEMENT_STATUSES
        )
        prices = self.pricing_resolver.snapshot()
        settlement = aggregate(reservations, prices)
        missing = unpriced_services(reservations, prices)
        if missing:
            _logger.warning(
                "Settling worker %s on %s with unpriced services: %s",
                worker_id,
                date_key,
                ", ".join(missing),
            )

        closed = self.repository.close_session(
            session.id, session.version, self.calendar.now(), settlement
        )
        if closed is None:
            # Another request closed the day between our read and write.
            raise NoOpenSessionError

        _logger.info(
            "Work session closed for worker %s on %s: count=%s revenue=%s",
            worker_id,
            date_key,
            settlement.count,
            settlement.revenue,
        )
        self._record(worker_id, closed, "closed", before=session)
        return closed

    def summary(self, worker_id: UUID) -> ShiftSummary:
        """Return today's session, if any, with all of today's reservations."""
        date_key = self.calendar.today_key()
        session = self.repository.get_session(worker_id, date_key)
        reservations = self.reservation_ledger.find_for_worker_on_date(
            worker_id, date_key
        )
        return ShiftSummary(
            date_key=date_key, session=session, reservations=reservations
        )

    def _record(
        self,
        worker_id: UUID,
        session: WorkSession,
        event_type: str,
        before: WorkSession | None,
    ) -> None:
        if self.audit_service is None:
            return
        self.audit_service.record_event(
            worker_id=worker_id,
            entity_type="work_session",
            entity_id=session.id,
            event_type=event_type,
            before=_audit_state(before) if before else None,
            after=_audit_state(session),
        )


def _audit_state(session: WorkSession) -> dict[str, object]:
    return {
        "date_key": session.date_key,
        "opened_at": session.opened_at.isoformat(),
        "closed_at": session.closed_at.isoformat() if session.closed_at else None,
        "total_count": session.total_count,
        "total_revenue": str(session.total_revenue),
    }
