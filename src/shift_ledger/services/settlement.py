"""Settlement totals for a set of reservations."""

from collections.abc import Iterable
from decimal import Decimal

from shift_ledger.domain.catalog import PriceSnapshot
from shift_ledger.domain.reservations import LineItem, Reservation
from shift_ledger.domain.shifts import Settlement


def aggregate(reservations: Iterable[Reservation], prices: PriceSnapshot) -> Settlement:
    """Count reservations and sum price * quantity over their line items.

    Service names missing from ``prices`` contribute nothing.
    """
    count = 0
    revenue = Decimal(0)
    for reservation in reservations:
        count += 1
        for item in reservation.line_items:
            revenue += prices.price_for(item.service_name) * effective_quantity(item)
    return Settlement(count=count, revenue=revenue)


def effective_quantity(item: LineItem) -> int:
    """Return the billed quantity, defaulting to 1 when unset or invalid."""
    quantity = item.quantity
    if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0:
        return quantity
    return 1


def unpriced_services(
    reservations: Iterable[Reservation], prices: PriceSnapshot
) -> list[str]:
    """Return service names that the snapshot has no price for."""
    names = {
        item.service_name
        for reservation in reservations
        for item in reservation.line_items
        if item.service_name not in prices
    }
    return sorted(names)
