from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from flask import Flask
from flask.testing import FlaskClient

from vcoin.app import create_app
from vcoin.config import Settings
from vcoin.core.clock import FixedClock
from vcoin.core.storage import InMemoryStorage
from vcoin.domain.accrual import Deposit, RatePeriod

BUENOS_AIRES = "America/Argentina/Buenos_Aires"

# 12:00 in Buenos Aires
NOW = datetime(2025, 5, 10, 15, 0, tzinfo=timezone.utc)


def build_storage() -> InMemoryStorage:
    storage = InMemoryStorage()

    storage.add_class(7, start_date=date(2025, 3, 1), end_date=date(2025, 6, 30), timezone=BUENOS_AIRES)
    storage.add_rate_period(7, RatePeriod(effective_date=date(2025, 3, 1), monthly_rate=0.01))
    storage.add_rate_period(7, RatePeriod(effective_date=date(2025, 5, 1), monthly_rate=0.02))
    storage.add_student(11, class_id=7)
    storage.add_deposit(11, Deposit(date=date(2025, 4, 13), amount=100000.0, concept="Ahorro"))
    storage.add_deposit(11, Deposit(date=date(2025, 4, 18), amount=50000.0, concept="Rifa"))
    storage.add_student(12, class_id=7)

    # rates only start after the student's first deposit
    storage.add_class(8, end_date=date(2025, 6, 30), timezone=BUENOS_AIRES)
    storage.add_rate_period(8, RatePeriod(effective_date=date(2025, 5, 1), monthly_rate=0.01))
    storage.add_student(13, class_id=8)
    storage.add_deposit(13, Deposit(date=date(2025, 4, 1), amount=1000.0))
    return storage


@pytest.fixture()
def storage() -> InMemoryStorage:
    return build_storage()


@pytest.fixture()
def app(storage: InMemoryStorage) -> Flask:
    settings = Settings(use_sample_data=False, log_level="WARNING")
    return create_app(settings=settings, storage=storage, clock=FixedClock(NOW))


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
