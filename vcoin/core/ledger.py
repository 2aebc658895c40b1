"""Read-only view over a student's deposits."""

from __future__ import annotations

from bisect import bisect_right
from datetime import date
from typing import Iterable, Iterator, List, Optional

from vcoin.domain.accrual import Deposit


class CashFlowLedger:
    def __init__(self, deposits: Iterable[Deposit] = ()):
        # sorted() is stable, so same-day deposits keep insertion order
        self._deposits: List[Deposit] = sorted(deposits, key=lambda d: d.date)
        self._dates: List[date] = [d.date for d in self._deposits]

    def __len__(self) -> int:
        return len(self._deposits)

    def __iter__(self) -> Iterator[Deposit]:
        return iter(self._deposits)

    @property
    def is_empty(self) -> bool:
        return not self._deposits

    def deposits(self) -> List[Deposit]:
        return list(self._deposits)

    def first_deposit_date(self) -> Optional[date]:
        return self._dates[0] if self._dates else None

    def deposits_up_to(self, day: date) -> List[Deposit]:
        return self._deposits[: bisect_right(self._dates, day)]

    def total_principal_at(self, day: date) -> float:
        return sum((d.amount for d in self.deposits_up_to(day)), 0.0)
