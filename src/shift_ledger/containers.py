"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from shift_ledger.adapters.http_principal_resolver import HttpxPrincipalResolver
from shift_ledger.adapters.supabase_audit_repository import SupabaseAuditRepository
from shift_ledger.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from shift_ledger.adapters.supabase_reservation_repository import (
    SupabaseReservationRepository,
)
from shift_ledger.adapters.supabase_work_session_repository import (
    SupabaseWorkSessionRepository,
)
from shift_ledger.config import Settings
from shift_ledger.services.audit import AuditService
from shift_ledger.services.auth import PrincipalResolver
from shift_ledger.services.calendar import BusinessCalendar
from shift_ledger.services.pricing import PricingResolver
from shift_ledger.services.reservations import ReservationLedger
from shift_ledger.services.shifts import SessionManager


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    calendar: BusinessCalendar
    principal_resolver: PrincipalResolver
    pricing_resolver: PricingResolver
    reservation_ledger: ReservationLedger
    session_manager: SessionManager
    audit_service: AuditService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    calendar = BusinessCalendar.from_name(resolved_settings.business_timezone)
    audit_service = AuditService(SupabaseAuditRepository(supabase_client))
    pricing_resolver = PricingResolver(SupabaseCatalogRepository(supabase_client))
    reservation_ledger = ReservationLedger(
        repository=SupabaseReservationRepository(supabase_client),
        calendar=calendar,
        audit_service=audit_service,
    )
    session_manager = SessionManager(
        repository=SupabaseWorkSessionRepository(supabase_client),
        reservation_ledger=reservation_ledger,
        pricing_resolver=pricing_resolver,
        calendar=calendar,
        audit_service=audit_service,
    )
    principal_resolver = HttpxPrincipalResolver.create(
        auth_url=resolved_settings.resolved_auth_url(),
        api_key=resolved_settings.supabase_service_key,
    )

    async def close_resources() -> None:
        await principal_resolver.close()

    return AppContainer(
        settings=resolved_settings,
        calendar=calendar,
        principal_resolver=principal_resolver,
        pricing_resolver=pricing_resolver,
        reservation_ledger=reservation_ledger,
        session_manager=session_manager,
        audit_service=audit_service,
        close_resources=close_resources,
    )
