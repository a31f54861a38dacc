from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import DenialReason, MealSlot
from ..core.exceptions import AdmissionConflict, StudentNotFound
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from ..students.model import Student
from ..students.mysql_student_repository import STUDENT_COLUMNS, TOKEN_COLUMNS, row_to_student
from ..students.repository import StudentRepository
from .model import AdmissionIntent, Admitted, AttendanceRecord
from .repository import AttendanceRepository
from .store import RecordStore

logger = logging.getLogger(__name__)


class MySQLRecordStore(RecordStore):
    """RecordStore over MySQL.

    Reads and single writes delegate to the feature repositories;
    `commit_admission` runs on one connection so the record insert and the
    token decrement commit or roll back together.
    """

    def __init__(
        self,
        conn_factory: DatabaseConnection,
        students: StudentRepository,
        attendance: AttendanceRepository,
    ):
        self._conn_factory = conn_factory
        self._students = students
        self._attendance = attendance

    def get_student(self, student_id: int) -> Optional[Student]:
        return self._students.get_by_id(student_id)

    def list_attendance(
        self,
        student_id: int,
        meal_type: MealSlot,
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_student_meal_between(
            student_id=student_id, meal_type=meal_type, start=start, end=end
        )

    def insert_attendance(
        self,
        *,
        student_id: int,
        meal_type: MealSlot,
        meal_date: date,
        timestamp: datetime,
    ) -> int:
        return self._attendance.create_record(
            student_id=student_id, meal_type=meal_type, meal_date=meal_date, timestamp=timestamp
        )

    def update_student_tokens(
        self,
        student_id: int,
        meal_type: MealSlot,
        new_value: int,
        *,
        expected_version: Optional[int] = None,
    ) -> bool:
        return self._students.set_tokens(student_id, meal_type, new_value, expected_version=expected_version)

    def commit_admission(self, intent: AdmissionIntent) -> Admitted:
        column = TOKEN_COLUMNS[intent.meal_type]
        student_id = intent.student_id

        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock serializes admissions for this student across processes.
            cur.execute(
                f"SELECT {column} AS tokens, version FROM students WHERE student_id=%s FOR UPDATE",
                (student_id,),
            )
            locked = fetchone(cur)
            if not locked:
                raise StudentNotFound(student_id)
            if int(locked["tokens"]) <= 0:
                raise AdmissionConflict(DenialReason.NO_TOKENS_AVAILABLE)

            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(student_id, meal_type, meal_date, recorded_at)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (student_id, intent.meal_type.value, intent.meal_date, intent.timestamp),
                )
            except mysql.connector.IntegrityError as e:
                if is_duplicate_key(e):
                    raise AdmissionConflict(DenialReason.ALREADY_MARKED) from e
                raise
            attendance_id = int(cur.lastrowid)

            cur.execute(
                f"""
                UPDATE students
                SET {column}={column}-1, version=version+1
                WHERE student_id=%s AND version=%s AND {column} >= 1
                """,
                (student_id, int(locked["version"])),
            )
            if cur.rowcount != 1:
                raise AdmissionConflict(DenialReason.NO_TOKENS_AVAILABLE, "Token balance changed concurrently")

            cur.execute(f"SELECT {STUDENT_COLUMNS} FROM students WHERE student_id=%s", (student_id,))
            updated = row_to_student(fetchone(cur))

        logger.debug("Committed attendance %s for student %s", attendance_id, student_id)
        return Admitted(
            student=updated,
            record=AttendanceRecord(
                attendance_id=attendance_id,
                student_id=student_id,
                meal_type=intent.meal_type,
                meal_date=intent.meal_date,
                timestamp=intent.timestamp,
            ),
        )
