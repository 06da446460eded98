"""Supabase-backed reservation repository."""

from collections.abc import Collection
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from shift_ledger.adapters.supabase_errors import execute
from shift_ledger.domain.reservations import LineItem, Reservation, ReservationStatus
from shift_ledger.services.reservations import ReservationRepository

_COLUMNS = "id, worker_id, scheduled_at, status, services"


@dataclass
class SupabaseReservationRepository(ReservationRepository):
    """Supabase implementation for reservations."""

    client: Client

    def find_by_worker_and_date_range(
        self,
        worker_id: UUID,
        start: datetime,
        end: datetime,
        statuses: Collection[ReservationStatus] | None = None,
    ) -> list[Reservation]:
        """Return reservations of a worker scheduled within [start, end]."""
        query = (
            self.client.table("reservations")
            .select(_COLUMNS)
            .eq("worker_id", str(worker_id))
            .gte("scheduled_at", start.isoformat())
            .lte("scheduled_at", end.isoformat())
        )
        if statuses is not None:
            query = query.in_("status", sorted(status.value for status in statuses))
        response = execute(query, "query reservations")
        return [_parse_row(row) for row in response.data or []]

    def get_reservation(self, reservation_id: UUID) -> Reservation | None:
        """Return a reservation by id, if present."""
        response = execute(
            self.client.table("reservations")
            .select(_COLUMNS)
            .eq("id", str(reservation_id))
            .limit(1),
            "load reservation",
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def update_status(  # noqa: PLR0913
        self,
        reservation_id: UUID,
        expected_status: ReservationStatus,
        expected_worker_id: UUID | None,
        new_status: ReservationStatus,
        worker_id: UUID | None,
    ) -> Reservation | None:
        """Update status and assignee if both are still the expected ones."""
        query = (
            self.client.table("reservations")
            .update(
                {
                    "status": new_status.value,
                    "worker_id": str(worker_id) if worker_id else None,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(reservation_id))
            .eq("status", expected_status.value)
        )
        if expected_worker_id is None:
            query = query.is_("worker_id", "null")
        else:
            query = query.eq("worker_id", str(expected_worker_id))
        response = execute(query, "update reservation status")
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_actionable(self, worker_id: UUID) -> list[Reservation]:
        """Return unassigned pending reservations and the worker's open ones."""
        unassigned = execute(
            self.client.table("reservations")
            .select(_COLUMNS)
            .is_("worker_id", "null")
            .eq("status", ReservationStatus.PENDING.value),
            "query unassigned reservations",
        )
        own = execute(
            self.client.table("reservations")
            .select(_COLUMNS)
            .eq("worker_id", str(worker_id))
            .in_(
                "status",
                [ReservationStatus.PENDING.value, ReservationStatus.ACCEPTED.value],
            ),
            "query worker reservations",
        )
        rows = [*(unassigned.data or []), *(own.data or [])]
        return [_parse_row(row) for row in rows]


def _parse_row(row: dict[str, object]) -> Reservation:
    worker_raw = row.get("worker_id")
    scheduled_at = datetime.fromisoformat(str(row["scheduled_at"]))
    if scheduled_at.tzinfo is None:
        scheduled_at = scheduled_at.replace(tzinfo=UTC)
    return Reservation(
        id=UUID(str(row["id"])),
        worker_id=UUID(str(worker_raw)) if worker_raw else None,
        scheduled_at=scheduled_at,
        status=ReservationStatus(str(row["status"])),
        line_items=_parse_line_items(row.get("services")),
    )


def _parse_line_items(raw: object) -> tuple[LineItem, ...]:
    if not isinstance(raw, list):
        return ()
    items = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        items.append(
            LineItem(
                service_name=str(entry["name"]),
                quantity=_parse_quantity(entry.get("quantity")),
            )
        )
    return tuple(items)


def _parse_quantity(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None
