"""Shared test fixtures."""

import threading
from collections.abc import Collection
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from shift_ledger.config import Settings
from shift_ledger.containers import AppContainer
from shift_ledger.domain.catalog import ServiceCatalogEntry
from shift_ledger.domain.errors import UnauthorizedError
from shift_ledger.domain.models import WorkerPrincipal
from shift_ledger.domain.reservations import LineItem, Reservation, ReservationStatus
from shift_ledger.domain.shifts import Settlement, WorkSession
from shift_ledger.services.audit import AuditRepository, AuditService
from shift_ledger.services.auth import PrincipalResolver
from shift_ledger.services.calendar import BusinessCalendar
from shift_ledger.services.pricing import CatalogRepository, PricingResolver
from shift_ledger.services.reservations import (
    ReservationLedger,
    ReservationRepository,
)
from shift_ledger.services.shifts import SessionManager, WorkSessionRepository

# 2024-05-14 10:00 UTC
NOW = datetime(2024, 5, 14, 10, 0, tzinfo=UTC)
WORKER_TOKEN = "worker-token"
CUSTOMER_TOKEN = "customer-token"


@dataclass
class FakeClock:
    """Settable clock for deterministic day boundaries."""

    current: datetime = NOW

    def __call__(self) -> datetime:
        return self.current


@dataclass
class InMemoryWorkSessionRepository(WorkSessionRepository):
    """In-memory work session repository with conditional writes."""

    sessions: dict[tuple[UUID, str], WorkSession] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get_session(self, worker_id: UUID, date_key: str) -> WorkSession | None:
        return self.sessions.get((worker_id, date_key))

    def create_session(
        self, worker_id: UUID, date_key: str, opened_at: datetime
    ) -> WorkSession | None:
        with self._lock:
            if (worker_id, date_key) in self.sessions:
                return None
            session = WorkSession(
                id=uuid4(),
                worker_id=worker_id,
                date_key=date_key,
                opened_at=opened_at,
                closed_at=None,
                total_count=0,
                total_revenue=Decimal(0),
                version=1,
            )
            self.sessions[(worker_id, date_key)] = session
            return session

    def reopen_session(
        self, session_id: UUID, expected_version: int, opened_at: datetime
    ) -> WorkSession | None:
        return self._swap(
            session_id,
            expected_version,
            opened_at=opened_at,
            closed_at=None,
            total_count=0,
            total_revenue=Decimal(0),
        )

    def close_session(
        self,
        session_id: UUID,
        expected_version: int,
        closed_at: datetime,
        settlement: Settlement,
    ) -> WorkSession | None:
        return self._swap(
            session_id,
            expected_version,
            closed_at=closed_at,
            total_count=settlement.count,
            total_revenue=settlement.revenue,
        )

    def _swap(
        self, session_id: UUID, expected_version: int, **changes: object
    ) -> WorkSession | None:
        with self._lock:
            for key, session in self.sessions.items():
                if session.id != session_id:
                    continue
                if session.version != expected_version:
                    return None
                updated = replace(session, version=session.version + 1, **changes)
                self.sessions[key] = updated
                return updated
            return None


@dataclass
class InMemoryReservationRepository(ReservationRepository):
    """In-memory reservation repository for tests."""

    reservations: dict[UUID, Reservation] = field(default_factory=dict)

    def add(
        self,
        worker_id: UUID | None,
        status: ReservationStatus,
        items: list[tuple[str, int | None]],
        scheduled_at: datetime = NOW,
    ) -> Reservation:
        reservation = Reservation(
            id=uuid4(),
            worker_id=worker_id,
            scheduled_at=scheduled_at,
            status=status,
            line_items=tuple(LineItem(name, quantity) for name, quantity in items),
        )
        self.reservations[reservation.id] = reservation
        return reservation

    def find_by_worker_and_date_range(
        self,
        worker_id: UUID,
        start: datetime,
        end: datetime,
        statuses: Collection[ReservationStatus] | None = None,
    ) -> list[Reservation]:
        return [
            reservation
            for reservation in self.reservations.values()
            if reservation.worker_id == worker_id
            and start <= reservation.scheduled_at <= end
            and (statuses is None or reservation.status in statuses)
        ]

    def get_reservation(self, reservation_id: UUID) -> Reservation | None:
        return self.reservations.get(reservation_id)

    def update_status(  # noqa: PLR0913
        self,
        reservation_id: UUID,
        expected_status: ReservationStatus,
        expected_worker_id: UUID | None,
        new_status: ReservationStatus,
        worker_id: UUID | None,
    ) -> Reservation | None:
        current = self.reservations.get(reservation_id)
        if (
            current is None
            or current.status is not expected_status
            or current.worker_id != expected_worker_id
        ):
            return None
        updated = replace(current, status=new_status, worker_id=worker_id)
        self.reservations[reservation_id] = updated
        return updated

    def list_actionable(self, worker_id: UUID) -> list[Reservation]:
        return [
            reservation
            for reservation in self.reservations.values()
            if (
                reservation.worker_id is None
                and reservation.status is ReservationStatus.PENDING
            )
            or (
                reservation.worker_id == worker_id
                and reservation.status
                in {ReservationStatus.PENDING, ReservationStatus.ACCEPTED}
            )
        ]


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory service catalog for tests."""

    prices: dict[str, Decimal] = field(default_factory=dict)

    def list_services(self) -> list[ServiceCatalogEntry]:
        return [
            ServiceCatalogEntry(name=name, price=price)
            for name, price in self.prices.items()
        ]


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit repository for tests."""

    events: list[dict[str, object]] = field(default_factory=list)

    def create_event(  # noqa: PLR0913
        self,
        worker_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        self.events.append(
            {
                "worker_id": worker_id,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "event_type": event_type,
                "before": before,
                "after": after,
            }
        )


@dataclass
class FakePrincipalResolver(PrincipalResolver):
    """Resolves tokens from a fixed table."""

    principals: dict[str, WorkerPrincipal] = field(default_factory=dict)

    async def resolve(self, token: str) -> WorkerPrincipal:
        principal = self.principals.get(token)
        if principal is None:
            raise UnauthorizedError
        return principal


@dataclass
class LedgerFixture:
    """Services wired over in-memory repositories."""

    clock: FakeClock
    calendar: BusinessCalendar
    sessions: InMemoryWorkSessionRepository
    reservations: InMemoryReservationRepository
    catalog: InMemoryCatalogRepository
    audits: InMemoryAuditRepository
    reservation_ledger: ReservationLedger
    pricing_resolver: PricingResolver
    session_manager: SessionManager


def build_ledger(timezone_name: str = "UTC", now: datetime = NOW) -> LedgerFixture:
    clock = FakeClock(now)
    calendar = BusinessCalendar.from_name(timezone_name, clock=clock)
    sessions = InMemoryWorkSessionRepository()
    reservations = InMemoryReservationRepository()
    catalog = InMemoryCatalogRepository(
        {"Wash": Decimal("20"), "Wax": Decimal("15")}
    )
    audits = InMemoryAuditRepository()
    audit_service = AuditService(audits)
    reservation_ledger = ReservationLedger(
        repository=reservations, calendar=calendar, audit_service=audit_service
    )
    pricing_resolver = PricingResolver(catalog)
    session_manager = SessionManager(
        repository=sessions,
        reservation_ledger=reservation_ledger,
        pricing_resolver=pricing_resolver,
        calendar=calendar,
        audit_service=audit_service,
    )
    return LedgerFixture(
        clock=clock,
        calendar=calendar,
        sessions=sessions,
        reservations=reservations,
        catalog=catalog,
        audits=audits,
        reservation_ledger=reservation_ledger,
        pricing_resolver=pricing_resolver,
        session_manager=session_manager,
    )


@pytest.fixture
def ledger() -> LedgerFixture:
    return build_ledger()


@pytest.fixture
def worker_id() -> UUID:
    return uuid4()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
    )


@pytest.fixture
def principal_resolver(worker_id: UUID) -> FakePrincipalResolver:
    return FakePrincipalResolver(
        {
            WORKER_TOKEN: WorkerPrincipal(id=worker_id, role="worker"),
            CUSTOMER_TOKEN: WorkerPrincipal(id=uuid4(), role="customer"),
        }
    )


@pytest.fixture
def container(
    settings: Settings,
    ledger: LedgerFixture,
    principal_resolver: FakePrincipalResolver,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        calendar=ledger.calendar,
        principal_resolver=principal_resolver,
        pricing_resolver=ledger.pricing_resolver,
        reservation_ledger=ledger.reservation_ledger,
        session_manager=ledger.session_manager,
        audit_service=ledger.session_manager.audit_service,
        close_resources=close_resources,
    )
