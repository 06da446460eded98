"""Supabase-backed service catalog repository."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from supabase import Client

from shift_ledger.adapters.supabase_errors import execute
from shift_ledger.domain.catalog import ServiceCatalogEntry
from shift_ledger.services.pricing import CatalogRepository


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase implementation for catalog reads."""

    client: Client

    def list_services(self) -> list[ServiceCatalogEntry]:
        """Return every catalog entry."""
        response = execute(
            self.client.table("services").select("name, price"), "load service catalog"
        )
        return [
            ServiceCatalogEntry(
                name=str(row["name"]), price=_parse_price(row.get("price"))
            )
            for row in response.data or []
            if row.get("name")
        ]


def _parse_price(raw: object) -> Decimal:
    if raw is None or isinstance(raw, bool):
        return Decimal(0)
    try:
        price = Decimal(str(raw))
    except InvalidOperation:
        return Decimal(0)
    return price if price.is_finite() else Decimal(0)
