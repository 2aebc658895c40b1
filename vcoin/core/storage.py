"""Storage collaborator: where deposits, rates and class settings come from."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Protocol, Tuple

from vcoin.domain.accrual import Deposit, RatePeriod, StorageUnavailable

logger = logging.getLogger(__name__)


class UnknownRecord(LookupError):
    pass


class UnknownStudent(UnknownRecord):
    def __init__(self, student_id: int):
        super().__init__(f"unknown student {student_id}")
        self.student_id = student_id


class UnknownClass(UnknownRecord):
    def __init__(self, class_id: int):
        super().__init__(f"unknown class {class_id}")
        self.class_id = class_id


class Storage(Protocol):
    def ping(self) -> None: ...

    def get_student_class(self, student_id: int) -> int: ...

    def get_deposits(self, student_id: int) -> List[Deposit]: ...

    def get_rate_periods(self, class_id: int) -> List[RatePeriod]: ...

    def get_class_end_date(self, class_id: int) -> date: ...

    def get_class_start_date(self, class_id: int) -> Optional[date]: ...

    def get_class_timezone(self, class_id: int) -> str: ...


@dataclass
class ClassRecord:
    end_date: date
    timezone: str
    start_date: Optional[date] = None
    rate_periods: List[RatePeriod] = field(default_factory=list)


@dataclass
class StudentRecord:
    class_id: int
    deposits: List[Deposit] = field(default_factory=list)


class InMemoryStorage:
    """Dict-backed storage. Records are appended, never rewritten."""

    def __init__(self):
        self.classes: Dict[int, ClassRecord] = {}
        self.students: Dict[int, StudentRecord] = {}

    def ping(self) -> None:
        return None

    def add_class(
        self,
        class_id: int,
        end_date: date,
        timezone: str,
        start_date: Optional[date] = None,
    ) -> ClassRecord:
        record = ClassRecord(end_date=end_date, timezone=timezone, start_date=start_date)
        self.classes[class_id] = record
        return record

    def add_rate_period(self, class_id: int, period: RatePeriod) -> None:
        self._class(class_id).rate_periods.append(period)

    def add_student(self, student_id: int, class_id: int) -> StudentRecord:
        self._class(class_id)
        record = StudentRecord(class_id=class_id)
        self.students[student_id] = record
        return record

    def add_deposit(self, student_id: int, deposit: Deposit) -> None:
        self._student(student_id).deposits.append(deposit)

    def _class(self, class_id: int) -> ClassRecord:
        try:
            return self.classes[class_id]
        except KeyError:
            raise UnknownClass(class_id) from None

    def _student(self, student_id: int) -> StudentRecord:
        try:
            return self.students[student_id]
        except KeyError:
            raise UnknownStudent(student_id) from None

    def get_student_class(self, student_id: int) -> int:
        return self._student(student_id).class_id

    def get_deposits(self, student_id: int) -> List[Deposit]:
        return list(self._student(student_id).deposits)

    def get_rate_periods(self, class_id: int) -> List[RatePeriod]:
        return list(self._class(class_id).rate_periods)

    def get_class_end_date(self, class_id: int) -> date:
        return self._class(class_id).end_date

    def get_class_start_date(self, class_id: int) -> Optional[date]:
        return self._class(class_id).start_date

    def get_class_timezone(self, class_id: int) -> str:
        return self._class(class_id).timezone


def sample_storage(timezone: str = "America/Argentina/Buenos_Aires") -> InMemoryStorage:
    """Embedded demo data used when no real data source is reachable."""
    storage = InMemoryStorage()
    storage.add_class(1, start_date=date(2025, 3, 1), end_date=date(2025, 12, 15), timezone=timezone)
    storage.add_rate_period(1, RatePeriod(effective_date=date(2025, 3, 1), monthly_rate=0.01))
    storage.add_rate_period(1, RatePeriod(effective_date=date(2025, 6, 1), monthly_rate=0.015))
    storage.add_rate_period(1, RatePeriod(effective_date=date(2025, 9, 1), monthly_rate=0.0125))

    storage.add_student(1, class_id=1)
    storage.add_deposit(1, Deposit(date=date(2025, 4, 13), amount=100000.0, concept="Ahorro inicial"))
    storage.add_deposit(1, Deposit(date=date(2025, 5, 2), amount=25000.0, concept="Venta de rifas"))
    storage.add_deposit(1, Deposit(date=date(2025, 7, 20), amount=40000.0, concept="Feria de ciencias"))
    return storage


def select_data_source(primary: Storage, fallback: Storage) -> Tuple[Storage, str]:
    """Ping ``primary`` once and fall back when it is unavailable."""
    try:
        primary.ping()
    except StorageUnavailable as exc:
        logger.warning("primary storage unavailable, using fallback data: %s", exc)
        return fallback, "fallback"
    return primary, "primary"
