from __future__ import annotations

from datetime import date, timedelta

import pytest

from vcoin.core.ledger import CashFlowLedger
from vcoin.domain.accrual import Deposit


def test_deposits_sorted_with_stable_ties():
    ledger = CashFlowLedger(
        [
            Deposit(date=date(2025, 4, 20), amount=10.0, concept="c"),
            Deposit(date=date(2025, 4, 13), amount=1.0, concept="a"),
            Deposit(date=date(2025, 4, 20), amount=5.0, concept="d"),
            Deposit(date=date(2025, 4, 13), amount=2.0, concept="b"),
        ]
    )

    assert [d.concept for d in ledger.deposits()] == ["a", "b", "c", "d"]
    assert ledger.first_deposit_date() == date(2025, 4, 13)


def test_empty_ledger():
    ledger = CashFlowLedger()

    assert ledger.is_empty
    assert ledger.first_deposit_date() is None
    assert ledger.deposits_up_to(date(2030, 1, 1)) == []
    assert ledger.total_principal_at(date(2030, 1, 1)) == 0.0


def test_deposits_up_to_is_inclusive():
    ledger = CashFlowLedger(
        [
            Deposit(date=date(2025, 4, 13), amount=100.0),
            Deposit(date=date(2025, 4, 18), amount=50.0),
        ]
    )

    assert len(ledger.deposits_up_to(date(2025, 4, 17))) == 1
    assert len(ledger.deposits_up_to(date(2025, 4, 18))) == 2


def test_total_principal_is_monotonic():
    ledger = CashFlowLedger(
        [
            Deposit(date=date(2025, 4, 13), amount=100.0),
            Deposit(date=date(2025, 4, 13), amount=0.0),
            Deposit(date=date(2025, 5, 2), amount=25.0),
            Deposit(date=date(2025, 7, 20), amount=40.0),
        ]
    )

    day = date(2025, 4, 1)
    previous = 0.0
    while day <= date(2025, 8, 1):
        principal = ledger.total_principal_at(day)
        assert principal >= previous
        previous = principal
        day += timedelta(days=1)
    assert previous == 165.0


def test_negative_deposit_rejected():
    with pytest.raises(ValueError):
        Deposit(date=date(2025, 4, 13), amount=-1.0)
