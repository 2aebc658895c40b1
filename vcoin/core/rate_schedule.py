"""Piecewise-constant monthly interest rates for a class."""

from __future__ import annotations

import logging
from bisect import bisect_right
from datetime import date
from typing import Iterable, Iterator, List

from vcoin.domain.accrual import ArithmeticOverflow, NoRateDefined, RatePeriod

logger = logging.getLogger(__name__)

# A "month" is exactly 30 days for the monthly -> daily conversion.
DAYS_PER_MONTH = 30


def daily_rate(monthly_rate: float) -> float:
    """Return the compounding daily rate equivalent to ``monthly_rate``."""
    return (1.0 + monthly_rate) ** (1.0 / DAYS_PER_MONTH) - 1.0


class RateSchedule:
    """
    Immutable, date-sorted view over a class's rate history.

    The rate in force on a day is the one with the greatest
    ``effective_date <= day``. When two periods share an effective date the
    later one in the input wins.
    """

    def __init__(self, periods: Iterable[RatePeriod]):
        by_date = {}
        for period in periods:
            if period.effective_date in by_date:
                logger.warning(
                    "duplicate rate period on %s; keeping the later entry",
                    period.effective_date.isoformat(),
                )
            by_date[period.effective_date] = period

        self._periods: List[RatePeriod] = [by_date[d] for d in sorted(by_date)]
        self._dates: List[date] = [p.effective_date for p in self._periods]
        self._daily: List[float] = []
        for period in self._periods:
            try:
                self._daily.append(daily_rate(period.monthly_rate))
            except OverflowError as exc:
                raise ArithmeticOverflow(period.effective_date, str(exc)) from exc

    def __len__(self) -> int:
        return len(self._periods)

    def __iter__(self) -> Iterator[RatePeriod]:
        return iter(self._periods)

    @property
    def periods(self) -> List[RatePeriod]:
        return list(self._periods)

    @property
    def earliest_date(self):
        return self._dates[0] if self._dates else None

    def _index_for(self, day: date) -> int:
        index = bisect_right(self._dates, day) - 1
        if index < 0:
            raise NoRateDefined(day)
        return index

    def rate_effective_on(self, day: date) -> float:
        return self._periods[self._index_for(day)].monthly_rate

    def daily_rate_effective_on(self, day: date) -> float:
        return self._daily[self._index_for(day)]

    def current_rate(self, today: date) -> float:
        return self.rate_effective_on(today)

    def changes_within(self, start: date, end: date) -> List[RatePeriod]:
        """Periods taking effect in ``[start, end]``, ascending."""
        return [p for p in self._periods if start <= p.effective_date <= end]
