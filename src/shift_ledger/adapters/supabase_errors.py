"""Translation of PostgREST failures into ledger errors."""

from typing import TYPE_CHECKING, Any

import httpx
from supabase import PostgrestAPIError

from shift_ledger.domain.errors import PersistenceError

if TYPE_CHECKING:
    from postgrest import APIResponse, SyncQueryRequestBuilder

UNIQUE_VIOLATION = "23505"


def execute(query: "SyncQueryRequestBuilder[Any]", action: str) -> "APIResponse[Any]":
    """Run a PostgREST query, raising PersistenceError when the store fails."""
    try:
        return query.execute()
    except (PostgrestAPIError, httpx.HTTPError) as exc:
        raise PersistenceError(f"Failed to {action}") from exc


def is_unique_violation(exc: BaseException) -> bool:
    """Return True when a PersistenceError wraps a duplicate-key failure."""
    cause = exc.__cause__
    return isinstance(cause, PostgrestAPIError) and cause.code == UNIQUE_VIOLATION
