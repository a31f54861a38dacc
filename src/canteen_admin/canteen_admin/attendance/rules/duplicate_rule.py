from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ...common.datetime_utils import day_window
from ...core.enums import DenialReason, MealSlot
from ...students.model import Student
from ..model import AttendanceRecord, Denied
from .base import AdmissionRule


class DuplicateMealRule(AdmissionRule):
    """Deny when the student already has a record for this meal today."""

    def check(
        self,
        *,
        student: Student,
        meal_type: MealSlot,
        existing: Sequence[AttendanceRecord],
        now: datetime,
    ) -> Optional[Denied]:
        start, end = day_window(now.date())
        for r in existing:
            if r.student_id == student.student_id and r.meal_type == meal_type and start <= r.timestamp < end:
                return Denied.because(DenialReason.ALREADY_MARKED, student, meal_type)
        return None
