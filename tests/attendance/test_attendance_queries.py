from datetime import date, datetime

from src.canteen_admin.canteen_admin.attendance.service import AttendanceQueryService
from src.canteen_admin.canteen_admin.common.datetime_utils import day_window, meal_slot_for
from src.canteen_admin.canteen_admin.core.enums import MealSlot
from tests.fakes import InMemoryAttendance, InMemoryStudents, make_student


def _attendance():
    students = InMemoryStudents([make_student(1), make_student(2, name="Jane Smith")])
    attendance = InMemoryAttendance(students)
    for student_id, meal, ts in [
        (1, MealSlot.BREAKFAST, datetime(2025, 3, 10, 7, 30)),
        (2, MealSlot.BREAKFAST, datetime(2025, 3, 10, 8, 0)),
        (1, MealSlot.LUNCH, datetime(2025, 3, 10, 12, 15)),
        (1, MealSlot.DINNER, datetime(2025, 3, 9, 19, 0)),
    ]:
        attendance.create_record(student_id=student_id, meal_type=meal, meal_date=ts.date(), timestamp=ts)
    return attendance


def test_counts_for_day():
    counts = AttendanceQueryService(_attendance()).counts_for_day(date(2025, 3, 10))

    assert counts == {"date": "2025-03-10", "total": 3, "by_meal": {"breakfast": 2, "lunch": 1, "dinner": 0}}


def test_student_ids_attended():
    service = AttendanceQueryService(_attendance())

    assert service.student_ids_attended(MealSlot.BREAKFAST, date(2025, 3, 10)) == {1, 2}
    assert service.student_ids_attended(MealSlot.DINNER, date(2025, 3, 10)) == set()


def test_recent_is_newest_first_with_names():
    rows = AttendanceQueryService(_attendance()).recent(2)

    assert [r.meal_type for r in rows] == [MealSlot.LUNCH, MealSlot.BREAKFAST]
    assert rows[1].student_name == "Jane Smith"


def test_day_window_is_half_open():
    start, end = day_window(date(2025, 12, 31))

    assert start == datetime(2025, 12, 31, 0, 0)
    assert end == datetime(2026, 1, 1, 0, 0)


def test_meal_slot_boundaries():
    assert meal_slot_for(datetime(2025, 3, 10, 5, 59)) == MealSlot.DINNER
    assert meal_slot_for(datetime(2025, 3, 10, 6, 0)) == MealSlot.BREAKFAST
    assert meal_slot_for(datetime(2025, 3, 10, 10, 59)) == MealSlot.BREAKFAST
    assert meal_slot_for(datetime(2025, 3, 10, 11, 0)) == MealSlot.LUNCH
    assert meal_slot_for(datetime(2025, 3, 10, 15, 59)) == MealSlot.LUNCH
    assert meal_slot_for(datetime(2025, 3, 10, 16, 0)) == MealSlot.DINNER
