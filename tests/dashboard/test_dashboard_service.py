from datetime import date, datetime

from src.canteen_admin.canteen_admin.attendance.service import AttendanceQueryService
from src.canteen_admin.canteen_admin.core.enums import MealSlot, NotificationStatus
from src.canteen_admin.canteen_admin.dashboard.service import DashboardService
from src.canteen_admin.canteen_admin.notifications.service import NotificationService
from tests.fakes import InMemoryAttendance, InMemoryNotifications, InMemoryStudents, make_student


def test_summary_counts_and_usage():
    students = InMemoryStudents([make_student(i, name=f"Student {i}") for i in range(1, 5)])
    attendance = InMemoryAttendance(students)
    for i, meal in [(1, MealSlot.BREAKFAST), (2, MealSlot.BREAKFAST), (1, MealSlot.LUNCH)]:
        ts = datetime(2025, 3, 10, 8 if meal == MealSlot.BREAKFAST else 12, i)
        attendance.create_record(student_id=i, meal_type=meal, meal_date=ts.date(), timestamp=ts)
    attendance.create_record(
        student_id=3, meal_type=MealSlot.DINNER, meal_date=date(2025, 3, 9), timestamp=datetime(2025, 3, 9, 19, 0)
    )

    notifications = InMemoryNotifications()
    notifications.create(title="t", message="m", recipients=[1], sent_at=datetime(2025, 3, 10), status=NotificationStatus.PENDING)
    queries = AttendanceQueryService(attendance)

    summary = DashboardService(students, queries, NotificationService(notifications, students, queries)).summary(
        day=date(2025, 3, 10)
    )

    assert summary.total_students == 4
    assert summary.today_attendance == 3
    assert summary.by_meal == {"breakfast": 2, "lunch": 1, "dinner": 0}
    assert summary.pending_notifications == 1
    assert summary.token_usage_percent == 25.0
    assert len(summary.recent_attendance) == 4
    assert summary.recent_attendance[0]["meal_type"] == "lunch"
    assert summary.recent_attendance[0]["student_name"] == "Student 1"


def test_summary_with_empty_roster():
    students = InMemoryStudents()
    attendance = InMemoryAttendance(students)
    queries = AttendanceQueryService(attendance)

    summary = DashboardService(students, queries, NotificationService(InMemoryNotifications(), students, queries)).summary(
        day=date(2025, 3, 10)
    )

    assert summary.total_students == 0
    assert summary.token_usage_percent == 0.0
    assert summary.recent_attendance == []
