"""Data contracts for accrual calculations."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vcoin.domain.accrual import Deposit, RatePeriod


class DepositIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: dt.date
    amount: float = Field(..., ge=0, description="Deposited amount.")
    concept: str = ""

    def to_domain(self) -> Deposit:
        return Deposit(date=self.date, amount=self.amount, concept=self.concept)


class RatePeriodIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    effective_date: dt.date
    monthly_rate: float = Field(
        ...,
        gt=-1,
        description="Monthly rate expressed as a decimal (e.g. 0.01 for 1%).",
    )

    def to_domain(self) -> RatePeriod:
        return RatePeriod(effective_date=self.effective_date, monthly_rate=self.monthly_rate)


class AccrualRequest(BaseModel):
    """Inputs for a stateless accrual calculation."""

    model_config = ConfigDict(extra="forbid")

    deposits: List[DepositIn] = Field(default_factory=list)
    rate_periods: List[RatePeriodIn] = Field(default_factory=list)
    class_end_date: dt.date
    class_start_date: Optional[dt.date] = None
    today: Optional[dt.date] = Field(
        default=None,
        description="Evaluation date; defaults to the current date in the class timezone.",
    )
    timezone: Optional[str] = None

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone {value!r}") from None
        return value


class SeriesPoint(BaseModel):
    date: dt.date
    balance: float


class RateMarker(BaseModel):
    date: dt.date
    rate: float


class DepositRow(BaseModel):
    date: dt.date
    amount: float = Field(..., ge=0)
    concept: str = ""
    current_value: float
    gain_amount: float
    gain_percent: float
    days_held: int = Field(..., ge=0)


class StudentSummary(BaseModel):
    """Everything the student dashboard shows about an account."""

    current_balance: float
    total_invested: float = Field(..., ge=0)
    total_gain: float
    total_gain_percent: float
    projected_final_balance: float
    days_remaining: int = Field(..., ge=0)
    period_progress_percent: Optional[float] = None
    has_ended: bool
    current_rate: Optional[float] = None
    daily_series: List[SeriesPoint] = Field(default_factory=list)
    investment_markers: List[SeriesPoint] = Field(default_factory=list)
    rate_change_markers: List[RateMarker] = Field(default_factory=list)
    deposits: List[DepositRow] = Field(default_factory=list)


class CurrentAmountResponse(BaseModel):
    current_amount: float
    timestamp: dt.datetime
