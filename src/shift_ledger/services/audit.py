"""Audit logging service."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from shift_ledger.domain.errors import PersistenceError

_logger = logging.getLogger(__name__)


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

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


@dataclass
class AuditService:
    """Service for recording audit events."""

    repository: AuditRepository

    def record_event(  # noqa: PLR0913
        self,
        worker_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Persist an audit event, logging instead of failing the caller."""
        try:
            self.repository.create_event(
                worker_id=worker_id,
                entity_type=entity_type,
                entity_id=entity_id,
                event_type=event_type,
                before=before,
                after=after,
            )
        except PersistenceError:
            _logger.exception(
                "Failed to record audit event: %s %s %s",
                entity_type,
                entity_id,
                event_type,
            )
