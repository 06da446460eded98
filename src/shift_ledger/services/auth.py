"""Worker authentication contracts."""

from typing import Protocol

from shift_ledger.domain.errors import ForbiddenError, UnauthorizedError
from shift_ledger.domain.models import WorkerPrincipal


class PrincipalResolver(Protocol):
    """Resolves a request credential to a principal."""

    async def resolve(self, token: str) -> WorkerPrincipal:
        """Return the principal for a bearer token or raise UnauthorizedError."""


def parse_bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        raise UnauthorizedError
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError
    return token


def ensure_worker(principal: WorkerPrincipal, worker_role: str) -> WorkerPrincipal:
    """Return the principal when it carries the worker role."""
    if principal.role != worker_role:
        raise ForbiddenError
    return principal
