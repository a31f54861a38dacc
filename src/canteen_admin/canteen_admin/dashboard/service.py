from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.service import AttendanceQueryService
from ..common.datetime_utils import now_local
from ..core.constants import MEALS_PER_DAY, RECENT_ATTENDANCE_LIMIT
from ..notifications.service import NotificationService
from ..students.repository import StudentRepository


@dataclass(frozen=True)
class DashboardSummary:
    total_students: int
    today_attendance: int
    by_meal: dict
    pending_notifications: int
    token_usage_percent: float
    recent_attendance: list[dict]


class DashboardService:
    def __init__(
        self,
        students: StudentRepository,
        attendance: AttendanceQueryService,
        notifications: NotificationService,
    ):
        self._students = students
        self._attendance = attendance
        self._notifications = notifications

    def summary(self, *, day: Optional[date] = None) -> DashboardSummary:
        day = day or now_local().date()
        total_students = self._students.count()
        counts = self._attendance.counts_for_day(day)

        possible = total_students * MEALS_PER_DAY
        usage = round(counts["total"] * 100.0 / possible, 1) if possible else 0.0

        recent = [
            {
                "id": r.attendance_id,
                "student_id": r.student_id,
                "student_name": r.student_name,
                "roll_number": r.roll_number,
                "meal_type": r.meal_type.value,
                "timestamp": r.timestamp.isoformat(),
            }
            for r in self._attendance.recent(RECENT_ATTENDANCE_LIMIT)
        ]

        return DashboardSummary(
            total_students=total_students,
            today_attendance=counts["total"],
            by_meal=counts["by_meal"],
            pending_notifications=self._notifications.pending_count(),
            token_usage_percent=usage,
            recent_attendance=recent,
        )
