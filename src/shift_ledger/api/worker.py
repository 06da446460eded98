"""Worker-facing shift and reservation endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, Request, status
from pydantic import BaseModel

from shift_ledger.domain.models import WorkerPrincipal  # noqa: TC001
from shift_ledger.domain.reservations import ReservationStatus
from shift_ledger.services.auth import ensure_worker, parse_bearer_token

if TYPE_CHECKING:
    from shift_ledger.containers import AppContainer
    from shift_ledger.domain.reservations import Reservation
    from shift_ledger.domain.shifts import WorkSession

router = APIRouter(prefix="/worker", tags=["worker"])


class StatusUpdate(BaseModel):
    """Requested reservation status."""

    status: ReservationStatus


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_worker(
    request: Request,
    authorization: str | None = Header(default=None),
) -> WorkerPrincipal:
    """Resolve the bearer token and ensure the caller is a worker."""
    container = _container(request)
    token = parse_bearer_token(authorization)
    principal = await container.principal_resolver.resolve(token)
    return ensure_worker(principal, container.settings.worker_role)


@router.post("/shift/open", status_code=status.HTTP_201_CREATED)
async def open_shift(
    request: Request, worker: WorkerPrincipal = Depends(require_worker)
) -> dict[str, object]:
    """Open, or reopen, today's work session."""
    session = _container(request).session_manager.open_session(worker.id)
    return {"shift": serialize_session(session)}


@router.post("/shift/close")
async def close_shift(
    request: Request, worker: WorkerPrincipal = Depends(require_worker)
) -> dict[str, object]:
    """Close today's work session and return its settlement."""
    session = _container(request).session_manager.close_session(worker.id)
    return {"shift": serialize_session(session)}


@router.get("/shift/summary")
async def shift_summary(
    request: Request, worker: WorkerPrincipal = Depends(require_worker)
) -> dict[str, object]:
    """Return today's session and reservations."""
    summary = _container(request).session_manager.summary(worker.id)
    return {
        "date": summary.date_key,
        "shift": serialize_session(summary.session) if summary.session else None,
        "reservations": [serialize_reservation(r) for r in summary.reservations],
    }


@router.get("/reservations")
async def list_reservations(
    request: Request, worker: WorkerPrincipal = Depends(require_worker)
) -> dict[str, object]:
    """Return reservations the worker can accept, reject or complete."""
    reservations = _container(request).reservation_ledger.list_worker_queue(worker.id)
    return {"reservations": [serialize_reservation(r) for r in reservations]}


@router.patch("/reservations/{reservation_id}")
async def update_reservation(
    reservation_id: UUID,
    update: StatusUpdate,
    request: Request,
    worker: WorkerPrincipal = Depends(require_worker),
) -> dict[str, object]:
    """Move a reservation to a new status."""
    reservation = _container(request).reservation_ledger.transition(
        reservation_id, worker.id, update.status
    )
    return {"reservation": serialize_reservation(reservation)}


def serialize_session(session: WorkSession) -> dict[str, object]:
    """Return the JSON view of a work session."""
    return {
        "id": str(session.id),
        "worker_id": str(session.worker_id),
        "date": session.date_key,
        "opened_at": session.opened_at.isoformat(),
        "closed_at": session.closed_at.isoformat() if session.closed_at else None,
        "total_count": session.total_count,
        "total_revenue": str(session.total_revenue),
    }


def serialize_reservation(reservation: Reservation) -> dict[str, object]:
    """Return the JSON view of a reservation."""
    return {
        "id": str(reservation.id),
        "worker_id": str(reservation.worker_id) if reservation.worker_id else None,
        "datetime": reservation.scheduled_at.isoformat(),
        "status": reservation.status.value,
        "services": [
            {"name": item.service_name, "quantity": item.quantity}
            for item in reservation.line_items
        ],
    }
