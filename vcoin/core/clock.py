"""Wall-clock collaborator, injectable for tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current timezone-aware instant."""
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware instant")
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


def local_today(instant: datetime, tz: str) -> date:
    """Calendar date of ``instant`` as seen in ``tz``."""
    return instant.astimezone(ZoneInfo(tz)).date()
