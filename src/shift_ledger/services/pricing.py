"""Current catalog prices."""

from dataclasses import dataclass
from typing import Protocol

from shift_ledger.domain.catalog import PriceSnapshot, ServiceCatalogEntry


class CatalogRepository(Protocol):
    """Read access to the service catalog."""

    def list_services(self) -> list[ServiceCatalogEntry]:
        """Return every catalog entry."""


@dataclass
class PricingResolver:
    """Reads price snapshots from the catalog."""

    repository: CatalogRepository

    def snapshot(self) -> PriceSnapshot:
        """Return the prices current at call time."""
        return PriceSnapshot(
            {entry.name: entry.price for entry in self.repository.list_services()}
        )

    def list_services(self) -> list[ServiceCatalogEntry]:
        """Return the catalog sorted by service name."""
        return sorted(self.repository.list_services(), key=lambda entry: entry.name)
