"""Record store boundary consumed by the admission flow."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import MealSlot
from ..students.model import Student
from .model import AdmissionIntent, Admitted, AttendanceRecord


class RecordStore(Protocol):
    """The four logical store operations plus the transactional commit.

    Every call either returns within the store's timeout or raises
    StoreUnavailable.
    """

    def get_student(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def list_attendance(
        self,
        student_id: int,
        meal_type: MealSlot,
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert_attendance(
        self,
        *,
        student_id: int,
        meal_type: MealSlot,
        meal_date: date,
        timestamp: datetime,
    ) -> int:
        raise NotImplementedError

    def update_student_tokens(
        self,
        student_id: int,
        meal_type: MealSlot,
        new_value: int,
        *,
        expected_version: Optional[int] = None,
    ) -> bool:
        raise NotImplementedError

    def commit_admission(self, intent: AdmissionIntent) -> Admitted:
        """Insert the record and take one token in a single transaction.

        Raises AdmissionConflict when a concurrent writer got there first
        (record already exists or no token left), StudentNotFound when the
        student vanished.
        """

        raise NotImplementedError
