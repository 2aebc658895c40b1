from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


class AccrualError(Exception):
    """Base class for errors raised by the accrual engine."""


class NoRateDefined(AccrualError):
    def __init__(self, day: date):
        super().__init__(f"no interest rate configured before {day.isoformat()}")
        self.date = day


class ArithmeticOverflow(AccrualError):
    def __init__(self, day: date, detail: str = "balance is not finite"):
        super().__init__(f"arithmetic overflow on {day.isoformat()}: {detail}")
        self.date = day


class StorageUnavailable(AccrualError):
    pass


@dataclass(frozen=True)
class Deposit:
    date: date
    amount: float
    concept: str = ""

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("deposit amount must be non-negative")


@dataclass(frozen=True)
class RatePeriod:
    """Monthly rate in force from ``effective_date`` until superseded."""

    effective_date: date
    monthly_rate: float

    def __post_init__(self):
        if self.monthly_rate <= -1:
            raise ValueError("monthly_rate must be greater than -1")


@dataclass(frozen=True)
class BalancePoint:
    date: date
    balance: float


@dataclass(frozen=True)
class InvestmentMarker:
    date: date
    balance: float


@dataclass(frozen=True)
class RateChangeMarker:
    date: date
    rate: float


@dataclass
class BalanceSeries:
    points: List[BalancePoint] = field(default_factory=list)
    investment_markers: List[InvestmentMarker] = field(default_factory=list)
    rate_change_markers: List[RateChangeMarker] = field(default_factory=list)

    @property
    def start_date(self) -> Optional[date]:
        return self.points[0].date if self.points else None

    @property
    def end_date(self) -> Optional[date]:
        return self.points[-1].date if self.points else None

    @property
    def final_balance(self) -> float:
        return self.points[-1].balance if self.points else 0.0

    def is_empty(self) -> bool:
        return not self.points


@dataclass(frozen=True)
class DepositSummary:
    """Value of a single deposit accrued on its own."""

    deposit: Deposit
    current_value: float
    gain_amount: float
    gain_percent: float
    days_held: int


__all__ = [
    "AccrualError",
    "NoRateDefined",
    "ArithmeticOverflow",
    "StorageUnavailable",
    "Deposit",
    "RatePeriod",
    "BalancePoint",
    "InvestmentMarker",
    "RateChangeMarker",
    "BalanceSeries",
    "DepositSummary",
]
