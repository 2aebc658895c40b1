"""Assemble the per-student dashboard numbers from the accrual engine."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from vcoin.core.accrual import AccrualEngine
from vcoin.core.clock import Clock, local_today
from vcoin.core.ledger import CashFlowLedger
from vcoin.core.projection import (
    ProjectionEngine,
    has_reached_end,
    period_progress_percent,
)
from vcoin.core.rate_schedule import RateSchedule
from vcoin.core.storage import Storage
from vcoin.schemas.accrual import (
    AccrualRequest,
    DepositRow,
    RateMarker,
    SeriesPoint,
    StudentSummary,
)

logger = logging.getLogger(__name__)


def summarize(
    ledger: CashFlowLedger,
    schedule: RateSchedule,
    class_end_date: date,
    today: date,
    has_ended: bool,
    class_start_date: Optional[date] = None,
    max_window_days: Optional[int] = None,
) -> StudentSummary:
    """
    Build a StudentSummary for one evaluation date.

    The daily series is computed once; the current balance, the gain and the
    investment markers are all read from it. Balances are evaluated on
    ``min(today, class_end_date)``. Walks longer than ``max_window_days``
    raise ``ArithmeticOverflow``.
    """
    engine = AccrualEngine(ledger, schedule, max_window_days)
    projection = ProjectionEngine(engine)
    as_of = min(today, class_end_date)

    series = engine.series_for(today, class_end_date)
    current_balance = series.final_balance
    total_invested = ledger.total_principal_at(as_of)
    gain_percent = (
        (current_balance - total_invested) / total_invested * 100 if total_invested else 0.0
    )

    current_rate = None
    if schedule.earliest_date is not None and schedule.earliest_date <= as_of:
        current_rate = schedule.current_rate(as_of)

    projected = projection.projected_final_balance(today, class_end_date)

    progress = None
    if class_start_date is not None:
        progress = period_progress_percent(class_start_date, class_end_date, today)

    logger.debug(
        "summary as of %s: balance=%.4f invested=%.2f points=%d",
        as_of,
        current_balance,
        total_invested,
        len(series.points),
    )

    return StudentSummary(
        current_balance=current_balance,
        total_invested=total_invested,
        total_gain=current_balance - total_invested,
        total_gain_percent=gain_percent,
        projected_final_balance=projected,
        days_remaining=projection.days_remaining(today, class_end_date),
        period_progress_percent=progress,
        has_ended=has_ended,
        current_rate=current_rate,
        daily_series=[SeriesPoint(date=p.date, balance=p.balance) for p in series.points],
        investment_markers=[
            SeriesPoint(date=m.date, balance=m.balance) for m in series.investment_markers
        ],
        rate_change_markers=[
            RateMarker(date=m.date, rate=m.rate) for m in series.rate_change_markers
        ],
        deposits=[
            DepositRow(
                date=row.deposit.date,
                amount=row.deposit.amount,
                concept=row.deposit.concept,
                current_value=row.current_value,
                gain_amount=row.gain_amount,
                gain_percent=row.gain_percent,
                days_held=row.days_held,
            )
            for row in engine.deposit_breakdown(as_of)
        ],
    )


def summarize_request(
    request: AccrualRequest,
    now: datetime,
    default_timezone: str,
    max_window_days: Optional[int] = None,
) -> StudentSummary:
    """Stateless variant driven entirely by the request body."""
    timezone = request.timezone or default_timezone
    today = request.today or local_today(now, timezone)
    return summarize(
        ledger=CashFlowLedger(d.to_domain() for d in request.deposits),
        schedule=RateSchedule(p.to_domain() for p in request.rate_periods),
        class_end_date=request.class_end_date,
        today=today,
        has_ended=today > request.class_end_date,
        class_start_date=request.class_start_date,
        max_window_days=max_window_days,
    )


def build_student_summary(
    storage: Storage,
    clock: Clock,
    student_id: int,
    max_window_days: Optional[int] = None,
) -> StudentSummary:
    class_id = storage.get_student_class(student_id)
    ledger = CashFlowLedger(storage.get_deposits(student_id))
    schedule = RateSchedule(storage.get_rate_periods(class_id))
    end_date = storage.get_class_end_date(class_id)
    timezone = storage.get_class_timezone(class_id)

    # read once so a request straddling midnight sees a single "today"
    now = clock.now()
    return summarize(
        ledger=ledger,
        schedule=schedule,
        class_end_date=end_date,
        today=local_today(now, timezone),
        has_ended=has_reached_end(now, end_date, timezone),
        class_start_date=storage.get_class_start_date(class_id),
        max_window_days=max_window_days,
    )


def current_amount(
    storage: Storage,
    now: datetime,
    student_id: int,
    max_window_days: Optional[int] = None,
) -> float:
    class_id = storage.get_student_class(student_id)
    engine = AccrualEngine(
        CashFlowLedger(storage.get_deposits(student_id)),
        RateSchedule(storage.get_rate_periods(class_id)),
        max_window_days,
    )
    end_date = storage.get_class_end_date(class_id)
    today = local_today(now, storage.get_class_timezone(class_id))
    return engine.balance_at(min(today, end_date))
