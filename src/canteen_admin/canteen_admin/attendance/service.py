from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import day_window, meal_slot_for, now_local
from ..core.constants import ADMISSION_LOCK_TIMEOUT_SECONDS
from ..core.enums import MealSlot
from ..core.exceptions import AdmissionConflict, IdentityNotRecognized, StudentNotFound
from ..recognition.identifier import StudentIdentifier
from .locks import KeyedLocks
from .model import AdmissionResult, Admitted, Denied
from .policy import AdmissionPolicy
from .repository import AttendanceRepository
from .store import RecordStore

logger = logging.getLogger(__name__)


class AdmissionService:
    """Use case: admit a recognized student to a meal.

    Admissions for one (student, meal, day) key run one at a time; the
    decision itself is delegated to a pure AdmissionPolicy and its effects
    are committed through RecordStore.commit_admission.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        policy: Optional[AdmissionPolicy] = None,
        identifier: Optional[StudentIdentifier] = None,
        locks: Optional[KeyedLocks] = None,
        lock_timeout: float = ADMISSION_LOCK_TIMEOUT_SECONDS,
    ):
        self._store = store
        self._policy = policy if policy is not None else AdmissionPolicy()
        self._identifier = identifier
        self._locks = locks if locks is not None else KeyedLocks()
        self._lock_timeout = float(lock_timeout)

    def admit(
        self,
        student_id: int,
        meal_type: Optional[MealSlot] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AdmissionResult:
        now = now or now_local()
        meal_type = meal_type or meal_slot_for(now)
        today = now.date()

        with self._locks.hold((int(student_id), meal_type, today), timeout=self._lock_timeout):
            student = self._store.get_student(int(student_id))
            if not student:
                raise StudentNotFound(student_id)

            start, end = day_window(today)
            existing = self._store.list_attendance(student.student_id, meal_type, start, end)

            outcome = self._policy.evaluate(student=student, meal_type=meal_type, existing=existing, now=now)
            if isinstance(outcome, Denied):
                logger.info("Denied %s for student %s: %s", meal_type.value, student.student_id, outcome.reason.value)
                return outcome

            try:
                admitted = self._store.commit_admission(outcome)
            except AdmissionConflict as e:
                # Another process won the race between our checks and the commit.
                logger.info("Admission conflict for student %s (%s): %s", student.student_id, meal_type.value, e)
                return Denied.because(e.reason, student, meal_type)

        logger.info(
            "Admitted student %s for %s (%d tokens left)",
            admitted.student.student_id,
            meal_type.value,
            admitted.student.tokens.get(meal_type),
        )
        return admitted

    def admit_image(
        self,
        image: bytes,
        meal_type: Optional[MealSlot] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AdmissionResult:
        if self._identifier is None:
            raise IdentityNotRecognized("No student identifier is configured")

        student_id = self._identifier.identify(image)
        if student_id is None:
            raise IdentityNotRecognized("No student recognized in the captured image")
        return self.admit(student_id, meal_type, now=now)


class AttendanceQueryService:
    """Read side: today's attendance numbers for the kiosk and dashboard."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def counts_for_day(self, day: date) -> dict:
        start, end = day_window(day)
        records = self._attendance.list_between(start=start, end=end)
        by_meal = Counter(r.meal_type for r in records)
        return {
            "date": day.strftime("%Y-%m-%d"),
            "total": len(records),
            "by_meal": {slot.value: int(by_meal.get(slot, 0)) for slot in MealSlot},
        }

    def student_ids_attended(self, meal_type: MealSlot, day: date) -> set[int]:
        start, end = day_window(day)
        return {r.student_id for r in self._attendance.list_between(start=start, end=end, meal_type=meal_type)}

    def recent(self, limit: int):
        return list(self._attendance.list_recent(limit))


def result_to_dict(result: AdmissionResult) -> dict:
    student = result.student
    out = {
        "admitted": result.admitted,
        "message": result.message,
        "student": {
            "id": student.student_id,
            "name": student.name,
            "roll_number": student.roll_number,
            "department": student.department,
            "year": student.year,
            "email": student.email,
            "tokens": student.tokens.as_dict(),
        },
    }
    if isinstance(result, Admitted):
        out["record"] = {
            "id": result.record.attendance_id,
            "meal_type": result.record.meal_type.value,
            "date": result.record.meal_date.strftime("%Y-%m-%d"),
            "timestamp": result.record.timestamp.isoformat(),
        }
    else:
        out["reason"] = result.reason.value
    return out
