"""Forward projection of a balance to the class end date."""

from __future__ import annotations

import math
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from vcoin.core.accrual import ONE_DAY, AccrualEngine
from vcoin.core.rate_schedule import daily_rate
from vcoin.domain.accrual import ArithmeticOverflow


def class_end_instant(class_end_date: date, timezone: str) -> datetime:
    """Last instant of ``class_end_date`` in the class's local timezone."""
    return datetime.combine(class_end_date, time.max, tzinfo=ZoneInfo(timezone))


def has_reached_end(now: datetime, class_end_date: date, timezone: str) -> bool:
    return now >= class_end_instant(class_end_date, timezone)


def days_remaining(today: date, class_end_date: date) -> int:
    return max(0, (class_end_date - today).days)


def period_progress_percent(start: date, end: date, today: date) -> float:
    """Share of the class period already elapsed, clamped to [0, 100]."""
    total = (end - start).days
    if total <= 0:
        return 0.0
    elapsed = (today - start).days
    return min(max(elapsed / total * 100, 0.0), 100.0)


class ProjectionEngine:
    """
    Project the balance to the class end date.

    The rate in force today is assumed to hold for every remaining day and no
    further deposits are added. Once the end date is reached the projection
    is simply the balance on that date.
    """

    def __init__(self, engine: AccrualEngine):
        self.engine = engine

    def days_remaining(self, today: date, class_end_date: date) -> int:
        return days_remaining(today, class_end_date)

    def projected_final_balance(self, today: date, class_end_date: date) -> float:
        if today >= class_end_date:
            return self.engine.balance_at(class_end_date)

        return self.project_balance(self.engine.balance_at(today), today, class_end_date)

    def project_balance(self, balance: float, today: date, class_end_date: date) -> float:
        """Compound an already-known balance on ``today`` forward to the end date."""
        if today >= class_end_date or self.engine.ledger.is_empty:
            return balance

        self.engine.check_window(today, class_end_date)
        factor = 1.0 + daily_rate(self.engine.schedule.current_rate(today))
        day = today
        while day < class_end_date:
            day += ONE_DAY
            balance = balance * factor
            if not math.isfinite(balance):
                raise ArithmeticOverflow(day)
        return balance


__all__ = [
    "ProjectionEngine",
    "class_end_instant",
    "has_reached_end",
    "days_remaining",
    "period_progress_percent",
]
