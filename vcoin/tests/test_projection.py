from __future__ import annotations

from datetime import date, datetime, timezone
from math import isclose

import pytest

from vcoin.core.accrual import AccrualEngine
from vcoin.core.clock import FixedClock, local_today
from vcoin.core.ledger import CashFlowLedger
from vcoin.core.projection import (
    ProjectionEngine,
    class_end_instant,
    days_remaining,
    has_reached_end,
    period_progress_percent,
)
from vcoin.core.rate_schedule import RateSchedule, daily_rate
from vcoin.domain.accrual import ArithmeticOverflow, Deposit, RatePeriod

END = date(2025, 6, 30)


def projection_for(deposits, periods) -> ProjectionEngine:
    return ProjectionEngine(AccrualEngine(CashFlowLedger(deposits), RateSchedule(periods)))


def schedule():
    return [
        RatePeriod(effective_date=date(2025, 3, 1), monthly_rate=0.01),
        RatePeriod(effective_date=date(2025, 5, 1), monthly_rate=0.02),
    ]


def test_projection_at_end_date_equals_balance():
    projection = projection_for([Deposit(date=date(2025, 4, 1), amount=1000.0)], schedule())

    assert projection.projected_final_balance(END, END) == projection.engine.balance_at(END)


def test_projection_after_end_date_uses_end_balance():
    projection = projection_for([Deposit(date=date(2025, 4, 1), amount=1000.0)], schedule())

    assert projection.projected_final_balance(date(2025, 8, 1), END) == projection.engine.balance_at(END)


def test_projection_uses_current_rate_for_remaining_days():
    today = date(2025, 5, 10)
    projection = projection_for([Deposit(date=date(2025, 4, 1), amount=1000.0)], schedule())

    expected = projection.engine.balance_at(today) * (1 + daily_rate(0.02)) ** (END - today).days
    assert isclose(projection.projected_final_balance(today, END), expected, rel_tol=1e-12)


def test_projection_ignores_future_rate_periods():
    periods = schedule() + [RatePeriod(effective_date=date(2025, 6, 1), monthly_rate=0.5)]
    today = date(2025, 5, 10)
    with_future = projection_for([Deposit(date=date(2025, 4, 1), amount=1000.0)], periods)
    without = projection_for([Deposit(date=date(2025, 4, 1), amount=1000.0)], schedule())

    assert with_future.projected_final_balance(today, END) == without.projected_final_balance(today, END)


def test_projection_of_empty_ledger_is_zero():
    projection = projection_for([], [])
    assert projection.projected_final_balance(date(2025, 5, 10), END) == 0.0


def test_projection_longer_than_limit_overflows():
    engine = AccrualEngine(
        CashFlowLedger([Deposit(date=date(2025, 4, 1), amount=1000.0)]),
        RateSchedule(schedule()),
        max_window_days=60,
    )
    projection = ProjectionEngine(engine)

    assert projection.projected_final_balance(date(2025, 5, 10), END) > 1000.0
    with pytest.raises(ArithmeticOverflow):
        projection.projected_final_balance(date(2025, 4, 10), END)


def test_days_remaining_floors_at_zero():
    assert days_remaining(date(2025, 6, 27), END) == 3
    assert days_remaining(END, END) == 0
    assert days_remaining(date(2025, 7, 5), END) == 0


def test_class_end_instant_is_local_end_of_day():
    instant = class_end_instant(END, "America/Argentina/Buenos_Aires")

    assert instant.date() == END
    assert instant.hour == 23 and instant.minute == 59
    assert instant.utcoffset().total_seconds() == -3 * 3600


@pytest.mark.parametrize(
    "now, ended",
    [
        (datetime(2025, 7, 1, 2, 30, tzinfo=timezone.utc), False),
        (datetime(2025, 7, 1, 3, 0, tzinfo=timezone.utc), True),
    ],
)
def test_has_reached_end_respects_class_timezone(now, ended):
    assert has_reached_end(now, END, "America/Argentina/Buenos_Aires") is ended


def test_local_today_uses_class_timezone():
    clock = FixedClock(datetime(2025, 7, 1, 2, 30, tzinfo=timezone.utc))
    assert local_today(clock.now(), "America/Argentina/Buenos_Aires") == END
    assert local_today(clock.now(), "UTC") == date(2025, 7, 1)


def test_fixed_clock_requires_aware_instant():
    with pytest.raises(ValueError):
        FixedClock(datetime(2025, 7, 1))


def test_period_progress_is_clamped():
    start = date(2025, 3, 1)
    assert period_progress_percent(start, END, date(2025, 2, 1)) == 0.0
    assert period_progress_percent(start, END, date(2025, 9, 1)) == 100.0
    assert isclose(period_progress_percent(start, END, date(2025, 5, 10)), 70 / 121 * 100)
    assert period_progress_percent(END, END, END) == 0.0
