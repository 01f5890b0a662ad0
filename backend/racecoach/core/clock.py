"""Source of "now" for every date-dependent entry point.

Routers receive a :class:`Clock` through ``Depends(get_clock)`` so tests can
swap in a :class:`FixedClock`. Core services never read the wall clock; they
take ``now`` as an argument.
"""

from datetime import date, datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    def __init__(self, instant: datetime) -> None:
        self._instant = ensure_utc(instant)

    def now(self) -> datetime:
        return self._instant


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def today(now: datetime) -> date:
    return ensure_utc(now).date()


def js_day_of_week(value: date) -> int:
    """Day index with Sunday as 0, the convention used by schedule slots."""
    return value.isoweekday() % 7


def get_clock() -> Clock:
    return SystemClock()
