"""Business-day calendar with an injected clock and timezone."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

_LAST_MILLISECOND = timedelta(milliseconds=1)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class BusinessCalendar:
    """Derives day keys and day bounds in the canonical business timezone."""

    timezone: ZoneInfo
    clock: Callable[[], datetime] = field(default=_utc_now)

    @classmethod
    def from_name(
        cls, timezone_name: str, clock: Callable[[], datetime] | None = None
    ) -> "BusinessCalendar":
        """Create a calendar for an IANA timezone name."""
        return cls(timezone=ZoneInfo(timezone_name), clock=clock or _utc_now)

    def now(self) -> datetime:
        """Return the current time as an aware datetime."""
        current = self.clock()
        if current.tzinfo is None:
            current = current.replace(tzinfo=UTC)
        return current

    def today_key(self) -> str:
        """Return today's date key (YYYY-MM-DD) in the business timezone."""
        return self.now().astimezone(self.timezone).date().isoformat()

    def day_bounds(self, date_key: str) -> tuple[datetime, datetime]:
        """Return the inclusive UTC bounds of a business day.

        The range covers 00:00:00.000 to 23:59:59.999 local time.
        """
        day = date.fromisoformat(date_key)
        start = datetime.combine(day, time.min, tzinfo=self.timezone)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=self.timezone)
        return start.astimezone(UTC), end.astimezone(UTC) - _LAST_MILLISECOND
