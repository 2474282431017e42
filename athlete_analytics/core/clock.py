"""Injectable notion of "today".

Window boundaries (ACWR lookback, TDEE lookback, today's check-in) are the
only place the engine touches wall-clock time. Everything else receives a
Clock so tests can pin the calendar.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Protocol

from athlete_analytics.config.settings import settings


class Clock(Protocol):
    """Source of the current local date and the local zone."""

    @property
    def tz(self) -> tzinfo: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall clock in the configured zone."""

    def __init__(self, tz: tzinfo | None = None):
        self._tz = tz or settings.tzinfo

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def today(self) -> date:
        return datetime.now(tz=self._tz).date()


class FixedClock:
    """Clock pinned to a given day, used by tests and backfills."""

    def __init__(self, today: date, tz: tzinfo | None = None):
        self._today = today
        self._tz = tz or timezone.utc

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def today(self) -> date:
        return self._today


def local_date(instant: datetime, tz: tzinfo) -> date:
    """Calendar date of an instant in the given zone.

    Naive datetimes are taken as already local.
    """
    if instant.tzinfo is None:
        return instant.date()
    return instant.astimezone(tz).date()
