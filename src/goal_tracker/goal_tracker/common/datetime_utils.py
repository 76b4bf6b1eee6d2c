from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

Clock = Callable[[], date]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    value = str(value).strip()
    if not value:
        return None
    # Accept full ISO timestamps as sent by browsers, keep the date part.
    return parse_iso_date(value[:10])


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    """Current local date (time of day stripped)."""
    return now_local().date()


def days_until(due: date, today: date) -> int:
    """Whole days from today to due. Negative when due is in the past."""
    return (due - today).days
