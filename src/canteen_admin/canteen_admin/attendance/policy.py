from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence, Union

from ..core.enums import MealSlot
from ..students.model import Student
from .model import AdmissionIntent, AttendanceRecord, Denied
from .rules.base import AdmissionRule
from .rules.duplicate_rule import DuplicateMealRule
from .rules.token_rule import TokenBalanceRule


def default_rules() -> list[AdmissionRule]:
    # Order matters: a student without tokens is denied for that even when
    # a record already exists.
    return [TokenBalanceRule(), DuplicateMealRule()]


@dataclass
class AdmissionPolicy:
    """Pure admission decision: snapshots in, Denied or AdmissionIntent out."""

    rules: list[AdmissionRule] = field(default_factory=default_rules)

    def evaluate(
        self,
        *,
        student: Student,
        meal_type: MealSlot,
        existing: Sequence[AttendanceRecord],
        now: datetime,
    ) -> Union[Denied, AdmissionIntent]:
        for rule in self.rules:
            denied = rule.check(student=student, meal_type=meal_type, existing=existing, now=now)
            if denied:
                return denied

        return AdmissionIntent(student=student, meal_type=meal_type, meal_date=now.date(), timestamp=now)
