from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import MealSlot
from .model import AttendanceRecord, RecentAttendanceRow


class AttendanceRepository(Protocol):
    def list_for_student_meal_between(
        self,
        *,
        student_id: int,
        meal_type: MealSlot,
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        """Records with `start <= timestamp < end`."""

        raise NotImplementedError

    def list_between(self, *, start: datetime, end: datetime, meal_type: Optional[MealSlot] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[RecentAttendanceRow]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        student_id: int,
        meal_type: MealSlot,
        meal_date: date,
        timestamp: datetime,
    ) -> int:
        raise NotImplementedError
