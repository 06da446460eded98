"""Principal resolution against the Supabase auth REST API."""

from dataclasses import dataclass
from uuid import UUID

import httpx

from shift_ledger.domain.errors import UnauthorizedError
from shift_ledger.domain.models import WorkerPrincipal
from shift_ledger.services.auth import PrincipalResolver

_REJECTED_STATUSES = {httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN}


@dataclass
class HttpxPrincipalResolver(PrincipalResolver):
    """Resolves bearer tokens via ``GET {auth_url}/user``."""

    auth_url: str
    api_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, auth_url: str, api_key: str) -> "HttpxPrincipalResolver":
        """Create a resolver with a managed httpx session."""
        return cls(
            auth_url=auth_url.rstrip("/"),
            api_key=api_key,
            http_client=httpx.AsyncClient(),
        )

    async def resolve(self, token: str) -> WorkerPrincipal:
        """Return the principal that owns the access token."""
        response = await self.http_client.get(
            f"{self.auth_url}/user",
            headers={"Authorization": f"Bearer {token}", "apikey": self.api_key},
            timeout=10,
        )
        if response.status_code in _REJECTED_STATUSES:
            raise UnauthorizedError
        response.raise_for_status()
        payload = response.json()
        try:
            principal_id = UUID(str(payload["id"]))
        except (KeyError, ValueError) as exc:
            raise UnauthorizedError from exc
        metadata = payload.get("app_metadata") or {}
        role = metadata.get("role") if isinstance(metadata, dict) else None
        role = role or payload.get("role", "")
        return WorkerPrincipal(id=principal_id, role=str(role))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
