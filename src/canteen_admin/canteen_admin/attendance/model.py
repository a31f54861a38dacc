from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

from ..core.enums import DenialReason, MealSlot
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one meal attendance. Immutable once stored."""

    attendance_id: int
    student_id: int
    meal_type: MealSlot
    meal_date: date
    timestamp: datetime


@dataclass(frozen=True)
class AdmissionIntent:
    """Effects of an admission, to be applied in one store transaction.

    The store inserts the record and takes one token from `meal_type`,
    both or neither. The token write is checked against the row version the
    transaction read.
    """

    student: Student
    meal_type: MealSlot
    meal_date: date
    timestamp: datetime

    @property
    def student_id(self) -> int:
        return self.student.student_id

    @property
    def expected_tokens(self) -> int:
        return self.student.tokens.get(self.meal_type)

    @property
    def new_tokens(self) -> int:
        return self.expected_tokens - 1

    @property
    def expected_version(self) -> int:
        return self.student.version


@dataclass(frozen=True)
class Admitted:
    student: Student
    record: AttendanceRecord

    admitted = True

    @property
    def message(self) -> str:
        return f"Attendance marked successfully for {self.record.meal_type.value}"


@dataclass(frozen=True)
class Denied:
    reason: DenialReason
    message: str
    student: Student

    admitted = False

    @classmethod
    def because(cls, reason: DenialReason, student: Student, meal_type: MealSlot) -> "Denied":
        if reason == DenialReason.NO_TOKENS_AVAILABLE:
            message = f"No {meal_type.value} tokens available for {student.name}"
        else:
            message = f"{student.name} already marked attendance for {meal_type.value} today"
        return cls(reason=reason, message=message, student=student)


AdmissionResult = Union[Admitted, Denied]


@dataclass(frozen=True)
class RecentAttendanceRow:
    """Read-model for dashboard lists."""

    attendance_id: int
    student_id: int
    student_name: str
    roll_number: str
    meal_type: MealSlot
    timestamp: datetime
