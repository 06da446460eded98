"""Supabase repository for audit events."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from shift_ledger.adapters.supabase_errors import execute
from shift_ledger.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed audit repository."""

    client: Client

    def create_event(  # noqa: PLR0913
        self,
        worker_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Create an audit event row."""
        execute(
            self.client.table("audit_events").insert(
                {
                    "worker_id": str(worker_id),
                    "entity_type": entity_type,
                    "entity_id": str(entity_id),
                    "event_type": event_type,
                    "before_json": before,
                    "after_json": after,
                }
            ),
            "record audit event",
        )
