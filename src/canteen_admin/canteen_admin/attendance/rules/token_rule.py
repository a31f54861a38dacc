from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ...core.enums import DenialReason, MealSlot
from ...students.model import Student
from ..model import AttendanceRecord, Denied
from .base import AdmissionRule


class TokenBalanceRule(AdmissionRule):
    """Deny when the student has no token left for the meal."""

    def check(
        self,
        *,
        student: Student,
        meal_type: MealSlot,
        existing: Sequence[AttendanceRecord],
        now: datetime,
    ) -> Optional[Denied]:
        if student.tokens.get(meal_type) <= 0:
            return Denied.because(DenialReason.NO_TOKENS_AVAILABLE, student, meal_type)
        return None
