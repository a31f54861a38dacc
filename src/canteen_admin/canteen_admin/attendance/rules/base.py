from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from ...core.enums import MealSlot
from ...students.model import Student
from ..model import AttendanceRecord, Denied


class AdmissionRule(ABC):
    """Strategy Pattern: one check an admission must pass.

    Rules are pure: they look at snapshots only and never touch the store.
    """

    @abstractmethod
    def check(
        self,
        *,
        student: Student,
        meal_type: MealSlot,
        existing: Sequence[AttendanceRecord],
        now: datetime,
    ) -> Optional[Denied]:
        raise NotImplementedError
