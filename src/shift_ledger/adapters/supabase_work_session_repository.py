"""Supabase-backed work session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from supabase import Client

from shift_ledger.adapters.supabase_errors import execute, is_unique_violation
from shift_ledger.domain.errors import PersistenceError
from shift_ledger.domain.shifts import Settlement, WorkSession
from shift_ledger.services.shifts import WorkSessionRepository

_COLUMNS = (
    "id, worker_id, date_key, opened_at, closed_at, total_count, total_revenue, version"
)


@dataclass
class SupabaseWorkSessionRepository(WorkSessionRepository):
    """Supabase implementation for work sessions.

    Relies on a unique (worker_id, date_key) constraint on ``work_sessions``.
    Updates are guarded on ``version`` so a concurrent writer is detected
    instead of overwritten.
    """

    client: Client

    def get_session(self, worker_id: UUID, date_key: str) -> WorkSession | None:
        """Return the worker's session for a day, if present."""
        response = execute(
            self.client.table("work_sessions")
            .select(_COLUMNS)
            .eq("worker_id", str(worker_id))
            .eq("date_key", date_key)
            .limit(1),
            "load work session",
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_session(
        self, worker_id: UUID, date_key: str, opened_at: datetime
    ) -> WorkSession | None:
        """Insert an open session unless the day already has one."""
        query = self.client.table("work_sessions").insert(
            {
                "worker_id": str(worker_id),
                "date_key": date_key,
                "opened_at": opened_at.isoformat(),
                "closed_at": None,
                "total_count": 0,
                "total_revenue": "0",
                "version": 1,
            }
        )
        try:
            response = execute(query, "create work session")
        except PersistenceError as exc:
            if is_unique_violation(exc):
                return None
            raise
        if not response.data:
            raise PersistenceError("Failed to create work session")
        return _parse_row(response.data[0])

    def reopen_session(
        self, session_id: UUID, expected_version: int, opened_at: datetime
    ) -> WorkSession | None:
        """Reopen a closed session with zeroed totals."""
        return self._conditional_update(
            session_id,
            expected_version,
            {
                "opened_at": opened_at.isoformat(),
                "closed_at": None,
                "total_count": 0,
                "total_revenue": "0",
            },
            "reopen work session",
        )

    def close_session(
        self,
        session_id: UUID,
        expected_version: int,
        closed_at: datetime,
        settlement: Settlement,
    ) -> WorkSession | None:
        """Close an open session and freeze its totals."""
        return self._conditional_update(
            session_id,
            expected_version,
            {
                "closed_at": closed_at.isoformat(),
                "total_count": settlement.count,
                "total_revenue": str(settlement.revenue),
            },
            "close work session",
        )

    def _conditional_update(
        self,
        session_id: UUID,
        expected_version: int,
        payload: dict[str, object],
        action: str,
    ) -> WorkSession | None:
        response = execute(
            self.client.table("work_sessions")
            .update(
                {
                    **payload,
                    "version": expected_version + 1,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(session_id))
            .eq("version", expected_version),
            action,
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> WorkSession:
    closed_at_raw = row.get("closed_at")
    return WorkSession(
        id=UUID(str(row["id"])),
        worker_id=UUID(str(row["worker_id"])),
        date_key=str(row["date_key"]),
        opened_at=datetime.fromisoformat(str(row["opened_at"])),
        closed_at=(
            datetime.fromisoformat(closed_at_raw)
            if isinstance(closed_at_raw, str) and closed_at_raw
            else None
        ),
        total_count=int(row.get("total_count") or 0),
        total_revenue=Decimal(str(row.get("total_revenue") or 0)),
        version=int(row.get("version") or 1),
    )
