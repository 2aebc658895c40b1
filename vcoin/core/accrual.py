"""Daily-compounding balance calculation over a deposit history."""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Dict, Iterator, List, Optional, Tuple

from vcoin.core.ledger import CashFlowLedger
from vcoin.core.rate_schedule import RateSchedule
from vcoin.domain.accrual import (
    ArithmeticOverflow,
    BalancePoint,
    BalanceSeries,
    DepositSummary,
    InvestmentMarker,
    RateChangeMarker,
)

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class AccrualEngine:
    """
    Compute balances for one ledger under one rate schedule.

    Order of operations (per day ``d`` after the first deposit date):
      1) Compound the previous balance with the daily rate in force on ``d - 1``.
      2) Add the deposits dated ``d`` (they earn nothing on their own day).

    On the first deposit date the balance is just that day's deposits.
    Nothing is cached between calls. When ``max_window_days`` is set, any
    walk longer than that many days raises ``ArithmeticOverflow``.
    """

    def __init__(
        self,
        ledger: CashFlowLedger,
        schedule: RateSchedule,
        max_window_days: Optional[int] = None,
    ):
        self.ledger = ledger
        self.schedule = schedule
        self.max_window_days = max_window_days

    def check_window(self, start: date, end: date) -> None:
        days = (end - start).days + 1
        if self.max_window_days is not None and days > self.max_window_days:
            raise ArithmeticOverflow(
                end, f"window of {days} days exceeds the limit of {self.max_window_days}"
            )

    def _walk(self, end: date) -> Iterator[Tuple[date, float]]:
        """Yield ``(day, balance)`` from the first deposit date through ``end``."""
        first = self.ledger.first_deposit_date()
        if first is None:
            return

        self.check_window(first, end)

        deposits = self.ledger.deposits()
        index = 0
        balance = 0.0
        day = first
        while day <= end:
            if day > first:
                factor = 1.0 + self.schedule.daily_rate_effective_on(day - ONE_DAY)
                balance = balance * factor

            added = 0.0
            while index < len(deposits) and deposits[index].date == day:
                added += deposits[index].amount
                index += 1
            balance += added

            if not math.isfinite(balance):
                raise ArithmeticOverflow(day)
            yield day, balance
            if day == end:
                break
            day += ONE_DAY

    def balance_at(self, day: date) -> float:
        first = self.ledger.first_deposit_date()
        if first is None or day < first:
            return 0.0

        balance = 0.0
        for _, balance in self._walk(day):
            pass
        return balance

    def total_principal_at(self, day: date) -> float:
        return self.ledger.total_principal_at(day)

    def total_gain_percent(self, day: date) -> float:
        principal = self.total_principal_at(day)
        if principal == 0:
            return 0.0
        return (self.balance_at(day) - principal) / principal * 100

    def accrual_window(self, today: date, class_end_date: date) -> Optional[Tuple[date, date]]:
        """Return ``(first deposit date, min(today, class end))`` or ``None``."""
        first = self.ledger.first_deposit_date()
        if first is None:
            return None

        end = min(today, class_end_date)
        if end < first:
            logger.debug("accrual window is empty: ends %s before first deposit %s", end, first)
            return None
        return first, end

    def daily_series(self, start: date, end: date) -> BalanceSeries:
        """Balances for every day of ``[start, end]`` plus chart markers.

        The recurrence runs once; the markers are read from the recorded
        points. Days before the first deposit are not part of the series.
        """
        first = self.ledger.first_deposit_date()
        if first is None:
            return BalanceSeries()

        start = max(start, first)
        if end < start:
            return BalanceSeries()

        points: List[BalancePoint] = [
            BalancePoint(date=day, balance=balance)
            for day, balance in self._walk(end)
            if day >= start
        ]
        by_day: Dict[date, float] = {point.date: point.balance for point in points}

        investment_markers = [
            InvestmentMarker(date=deposit.date, balance=by_day[deposit.date])
            for deposit in self.ledger
            if start <= deposit.date <= end
        ]
        rate_change_markers = [
            RateChangeMarker(date=period.effective_date, rate=period.monthly_rate)
            for period in self.schedule.changes_within(start, end)
        ]

        return BalanceSeries(
            points=points,
            investment_markers=investment_markers,
            rate_change_markers=rate_change_markers,
        )

    def series_for(self, today: date, class_end_date: date) -> BalanceSeries:
        window = self.accrual_window(today, class_end_date)
        if window is None:
            return BalanceSeries()
        return self.daily_series(*window)

    def deposit_breakdown(self, day: date) -> List[DepositSummary]:
        """Accrue each deposit on its own up to ``day``."""
        rows: List[DepositSummary] = []
        for deposit in self.ledger.deposits_up_to(day):
            single = AccrualEngine(CashFlowLedger([deposit]), self.schedule, self.max_window_days)
            value = single.balance_at(day)
            gain = value - deposit.amount
            rows.append(
                DepositSummary(
                    deposit=deposit,
                    current_value=value,
                    gain_amount=gain,
                    gain_percent=(gain / deposit.amount * 100) if deposit.amount else 0.0,
                    days_held=(day - deposit.date).days,
                )
            )
        return rows


__all__ = ["AccrualEngine", "ONE_DAY"]
