"""Tests for the business calendar."""

from datetime import UTC, datetime, timedelta

from shift_ledger.services.calendar import BusinessCalendar


def test_today_key_uses_business_timezone() -> None:
    now = datetime(2024, 5, 14, 23, 30, tzinfo=UTC)

    assert BusinessCalendar.from_name("UTC", clock=lambda: now).today_key() == (
        "2024-05-14"
    )
    assert BusinessCalendar.from_name(
        "Africa/Tunis", clock=lambda: now
    ).today_key() == "2024-05-15"
    assert BusinessCalendar.from_name(
        "America/New_York", clock=lambda: now
    ).today_key() == "2024-05-14"


def test_day_bounds_cover_whole_local_day() -> None:
    calendar = BusinessCalendar.from_name("Africa/Tunis")

    start, end = calendar.day_bounds("2024-05-15")

    assert start == datetime(2024, 5, 14, 23, 0, tzinfo=UTC)
    assert end == datetime(2024, 5, 15, 22, 59, 59, 999000, tzinfo=UTC)


def test_day_bounds_across_dst_change() -> None:
    calendar = BusinessCalendar.from_name("Europe/Paris")

    start, end = calendar.day_bounds("2024-03-31")

    assert start == datetime(2024, 3, 30, 23, 0, tzinfo=UTC)
    assert end == datetime(2024, 3, 31, 21, 59, 59, 999000, tzinfo=UTC)
    assert end - start == timedelta(hours=23) - timedelta(milliseconds=1)


def test_naive_clock_is_treated_as_utc() -> None:
    calendar = BusinessCalendar.from_name(
        "UTC", clock=lambda: datetime(2024, 1, 1, 12, 0)
    )

    assert calendar.now() == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
