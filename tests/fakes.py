"""In-memory repositories shared by the test modules."""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from src.canteen_admin.canteen_admin.admins.model import Admin
from src.canteen_admin.canteen_admin.attendance.model import (
    AdmissionIntent,
    Admitted,
    AttendanceRecord,
    RecentAttendanceRow,
)
from src.canteen_admin.canteen_admin.core.enums import DenialReason, MealSlot, NotificationStatus
from src.canteen_admin.canteen_admin.core.exceptions import AdmissionConflict, StudentNotFound
from src.canteen_admin.canteen_admin.notifications.model import Notification
from src.canteen_admin.canteen_admin.students.model import Student, TokenBalance


def make_student(
    student_id: int = 1,
    *,
    name: str = "John Doe",
    roll_number: Optional[str] = None,
    department: str = "Computer Science",
    year: int = 3,
    email: Optional[str] = None,
    breakfast: int = 10,
    lunch: int = 10,
    dinner: int = 10,
) -> Student:
    return Student(
        student_id=student_id,
        name=name,
        roll_number=roll_number or f"CS{student_id:04d}",
        department=department,
        year=year,
        email=email or f"student{student_id}@example.com",
        phone_number=None,
        tokens=TokenBalance(breakfast=breakfast, lunch=lunch, dinner=dinner),
    )


class InMemoryStudents:
    def __init__(self, students: Sequence[Student] = ()):
        self._lock = threading.RLock()
        self._rows: dict[int, Student] = {s.student_id: s for s in students}

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with self._lock:
            return self._rows.get(int(student_id))

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        with self._lock:
            return next((s for s in self._rows.values() if s.roll_number == roll_number), None)

    def list_all(self) -> Sequence[Student]:
        with self._lock:
            return sorted(self._rows.values(), key=lambda s: (s.name, s.student_id))

    def list_by_ids(self, student_ids: Sequence[int]) -> Sequence[Student]:
        with self._lock:
            return [self._rows[i] for i in student_ids if i in self._rows]

    def count(self) -> int:
        return len(self._rows)

    def create_student(self, *, name, roll_number, department, year, email, phone_number, tokens) -> int:
        with self._lock:
            student_id = max(self._rows, default=0) + 1
            self._rows[student_id] = Student(
                student_id=student_id,
                name=name,
                roll_number=roll_number,
                department=department,
                year=year,
                email=email,
                phone_number=phone_number,
                tokens=tokens,
            )
            return student_id

    def update_student(self, *, student_id, name, roll_number, department, year, email, phone_number, tokens) -> bool:
        with self._lock:
            current = self._rows.get(int(student_id))
            if not current:
                return False
            self._rows[current.student_id] = replace(
                current,
                name=name,
                roll_number=roll_number,
                department=department,
                year=year,
                email=email,
                phone_number=phone_number,
                tokens=tokens,
                version=current.version + 1,
            )
            return True

    def delete_by_id(self, student_id: int) -> bool:
        with self._lock:
            return self._rows.pop(int(student_id), None) is not None

    def set_tokens(self, student_id: int, meal_slot: MealSlot, new_value: int, *, expected_version=None) -> bool:
        with self._lock:
            current = self._rows.get(int(student_id))
            if not current:
                return False
            if expected_version is not None and current.version != expected_version:
                return False
            self._rows[current.student_id] = current.with_tokens(current.tokens.with_value(meal_slot, new_value))
            return True


class InMemoryAttendance:
    def __init__(self, students: Optional[InMemoryStudents] = None):
        self._lock = threading.RLock()
        self._students = students
        self.records: list[AttendanceRecord] = []

    def list_for_student_meal_between(self, *, student_id, meal_type, start, end) -> Sequence[AttendanceRecord]:
        with self._lock:
            return [
                r
                for r in self.records
                if r.student_id == student_id and r.meal_type == meal_type and start <= r.timestamp < end
            ]

    def list_between(self, *, start, end, meal_type=None) -> Sequence[AttendanceRecord]:
        with self._lock:
            return [
                r
                for r in self.records
                if start <= r.timestamp < end and (meal_type is None or r.meal_type == meal_type)
            ]

    def list_recent(self, limit: int) -> Sequence[RecentAttendanceRow]:
        with self._lock:
            items = sorted(self.records, key=lambda r: r.timestamp, reverse=True)[:limit]
        out = []
        for r in items:
            s = self._students.get_by_id(r.student_id) if self._students else None
            out.append(
                RecentAttendanceRow(
                    attendance_id=r.attendance_id,
                    student_id=r.student_id,
                    student_name=s.name if s else "?",
                    roll_number=s.roll_number if s else "?",
                    meal_type=r.meal_type,
                    timestamp=r.timestamp,
                )
            )
        return out

    def create_record(self, *, student_id: int, meal_type: MealSlot, meal_date: date, timestamp: datetime) -> int:
        with self._lock:
            attendance_id = len(self.records) + 1
            self.records.append(
                AttendanceRecord(
                    attendance_id=attendance_id,
                    student_id=int(student_id),
                    meal_type=meal_type,
                    meal_date=meal_date,
                    timestamp=timestamp,
                )
            )
            return attendance_id


class InMemoryRecordStore:
    """RecordStore with the same guarantees as the MySQL one.

    `commit_admission` holds one store-wide lock, which stands in for the row
    lock plus the unique key. `read_delay` widens the window between the
    checks and the commit so races show up in tests.
    """

    def __init__(
        self,
        students: InMemoryStudents,
        attendance: InMemoryAttendance,
        *,
        read_delay: float = 0.0,
        fail_commit_with: Optional[Exception] = None,
    ):
        self.students = students
        self.attendance = attendance
        self._commit_lock = threading.Lock()
        self._read_delay = read_delay
        self._fail_commit_with = fail_commit_with
        self.commits = 0

    def get_student(self, student_id: int) -> Optional[Student]:
        return self.students.get_by_id(student_id)

    def list_attendance(self, student_id, meal_type, start, end) -> Sequence[AttendanceRecord]:
        rows = self.attendance.list_for_student_meal_between(
            student_id=student_id, meal_type=meal_type, start=start, end=end
        )
        if self._read_delay:
            time.sleep(self._read_delay)
        return rows

    def insert_attendance(self, *, student_id, meal_type, meal_date, timestamp) -> int:
        return self.attendance.create_record(
            student_id=student_id, meal_type=meal_type, meal_date=meal_date, timestamp=timestamp
        )

    def update_student_tokens(self, student_id, meal_type, new_value, *, expected_version=None) -> bool:
        return self.students.set_tokens(student_id, meal_type, new_value, expected_version=expected_version)

    def commit_admission(self, intent: AdmissionIntent) -> Admitted:
        with self._commit_lock:
            if self._fail_commit_with is not None:
                raise self._fail_commit_with

            current = self.students.get_by_id(intent.student_id)
            if not current:
                raise StudentNotFound(intent.student_id)
            if current.tokens.get(intent.meal_type) <= 0:
                raise AdmissionConflict(DenialReason.NO_TOKENS_AVAILABLE)
            if any(
                r.student_id == intent.student_id and r.meal_type == intent.meal_type and r.meal_date == intent.meal_date
                for r in self.attendance.records
            ):
                raise AdmissionConflict(DenialReason.ALREADY_MARKED)

            attendance_id = self.insert_attendance(
                student_id=intent.student_id,
                meal_type=intent.meal_type,
                meal_date=intent.meal_date,
                timestamp=intent.timestamp,
            )
            ok = self.update_student_tokens(
                intent.student_id,
                intent.meal_type,
                current.tokens.get(intent.meal_type) - 1,
                expected_version=current.version,
            )
            assert ok, "version moved while holding the commit lock"
            self.commits += 1

            return Admitted(
                student=self.students.get_by_id(intent.student_id),
                record=AttendanceRecord(
                    attendance_id=attendance_id,
                    student_id=intent.student_id,
                    meal_type=intent.meal_type,
                    meal_date=intent.meal_date,
                    timestamp=intent.timestamp,
                ),
            )


class InMemoryNotifications:
    def __init__(self):
        self.items: list[Notification] = []

    def create(self, *, title, message, recipients, sent_at, status) -> int:
        notification_id = len(self.items) + 1
        self.items.append(
            Notification(
                notification_id=notification_id,
                title=title,
                message=message,
                recipients=tuple(recipients),
                sent_at=sent_at,
                status=status,
            )
        )
        return notification_id

    def list_recent(self, limit: int) -> Sequence[Notification]:
        return sorted(self.items, key=lambda n: (n.sent_at, n.notification_id), reverse=True)[:limit]

    def count_by_status(self, status: NotificationStatus) -> int:
        return sum(1 for n in self.items if n.status == status)


class InMemoryAdmins:
    def __init__(self, admins: Sequence[Admin] = ()):
        self._rows: dict[int, Admin] = {a.admin_id: a for a in admins}

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        return self._rows.get(int(admin_id))

    def get_by_email(self, email: str) -> Optional[Admin]:
        return next((a for a in self._rows.values() if a.email == email), None)

    def update_profile(self, admin_id: int, *, name: str, email: str) -> bool:
        current = self._rows.get(int(admin_id))
        if not current:
            return False
        self._rows[current.admin_id] = replace(current, name=name, email=email)
        return True

    def update_password_hash(self, admin_id: int, password_hash: str) -> bool:
        current = self._rows.get(int(admin_id))
        if not current:
            return False
        self._rows[current.admin_id] = replace(current, password_hash=password_hash)
        return True


# Scripted stand-ins for a mysql-connector connection.
class FakeCursor:
    """Replays one scripted step per execute(): (sql keyword, outcome dict)."""

    def __init__(self, script):
        self._script = list(script)
        self.executed = []
        self.statements = []
        self.rowcount = 0
        self.lastrowid = None
        self._row = None

    def execute(self, sql, params=None):
        keyword, outcome = self._script.pop(0)
        assert sql.strip().upper().startswith(keyword), sql
        self.executed.append((keyword, params))
        self.statements.append(" ".join(sql.split()))
        if "raise" in outcome:
            raise outcome["raise"]
        self._row = outcome.get("row")
        self.rowcount = outcome.get("rowcount", 0)
        self.lastrowid = outcome.get("lastrowid")

    def fetchone(self):
        return self._row

    def fetchall(self):
        return [self._row] if self._row else []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


STUDENT_ROW = {
    "student_id": 1,
    "name": "John Doe",
    "roll_number": "CS0001",
    "department": "Computer Science",
    "study_year": 3,
    "email": "student1@example.com",
    "phone_number": None,
    "breakfast_tokens": 10,
    "lunch_tokens": 2,
    "dinner_tokens": 10,
    "version": 8,
}

