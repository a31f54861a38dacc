from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import MealSlot
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord, RecentAttendanceRow
from .repository import AttendanceRepository

RECORD_COLUMNS = "attendance_id, student_id, meal_type, meal_date, recorded_at"


def row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        meal_type=MealSlot(r["meal_type"]),
        meal_date=r["meal_date"],
        timestamp=r["recorded_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student_meal_between(
        self,
        *,
        student_id: int,
        meal_type: MealSlot,
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {RECORD_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND meal_type=%s AND recorded_at >= %s AND recorded_at < %s
                ORDER BY recorded_at ASC
                """,
                (int(student_id), meal_type.value, start, end),
            )
            return [row_to_record(r) for r in fetchall(cur)]

    def list_between(self, *, start: datetime, end: datetime, meal_type: Optional[MealSlot] = None) -> Sequence[AttendanceRecord]:
        clauses = ["recorded_at >= %s", "recorded_at < %s"]
        params: list[object] = [start, end]
        if meal_type is not None:
            clauses.append("meal_type=%s")
            params.append(meal_type.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {RECORD_COLUMNS} FROM attendance_records WHERE {where} ORDER BY recorded_at ASC",
                tuple(params),
            )
            return [row_to_record(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[RecentAttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.attendance_id, ar.student_id, ar.meal_type, ar.recorded_at,
                       s.name, s.roll_number
                FROM attendance_records ar
                JOIN students s ON s.student_id = ar.student_id
                ORDER BY ar.recorded_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                RecentAttendanceRow(
                    attendance_id=int(r["attendance_id"]),
                    student_id=int(r["student_id"]),
                    student_name=r["name"],
                    roll_number=r["roll_number"],
                    meal_type=MealSlot(r["meal_type"]),
                    timestamp=r["recorded_at"],
                )
                for r in fetchall(cur)
            ]

    def create_record(
        self,
        *,
        student_id: int,
        meal_type: MealSlot,
        meal_date: date,
        timestamp: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, meal_type, meal_date, recorded_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(student_id), meal_type.value, meal_date, timestamp),
            )
            return int(cur.lastrowid)
