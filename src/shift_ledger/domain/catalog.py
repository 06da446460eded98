"""Domain models for the service catalog."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType


@dataclass(frozen=True)
class ServiceCatalogEntry:
    """A bookable service and its current price."""

    name: str
    price: Decimal


@dataclass(frozen=True)
class PriceSnapshot:
    """Service name to price mapping read at a point in time."""

    prices: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Non-finite prices count as missing.
        finite = {
            name: price for name, price in self.prices.items() if price.is_finite()
        }
        object.__setattr__(self, "prices", MappingProxyType(finite))

    def price_for(self, service_name: str) -> Decimal:
        """Return the price for a service, or zero when it is not in the catalog."""
        return self.prices.get(service_name, Decimal(0))

    def __contains__(self, service_name: object) -> bool:
        return service_name in self.prices
