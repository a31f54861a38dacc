from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import MealSlot
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_as, fetchall, fetchone
from .model import Student, TokenBalance
from .repository import StudentRepository

TOKEN_COLUMNS = {
    MealSlot.BREAKFAST: "breakfast_tokens",
    MealSlot.LUNCH: "lunch_tokens",
    MealSlot.DINNER: "dinner_tokens",
}

STUDENT_COLUMNS = """
    student_id, name, roll_number, department, study_year, email, phone_number,
    breakfast_tokens, lunch_tokens, dinner_tokens, version
"""


def row_to_student(r: Dict[str, Any]) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        name=r["name"],
        roll_number=r["roll_number"],
        department=r["department"],
        year=int(r["study_year"]),
        email=r["email"],
        phone_number=r.get("phone_number"),
        tokens=TokenBalance(
            breakfast=int(r["breakfast_tokens"]),
            lunch=int(r["lunch_tokens"]),
            dinner=int(r["dinner_tokens"]),
        ),
        version=int(r.get("version") or 0),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {STUDENT_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            row = fetchone(cur)
            return row_to_student(row) if row else None

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {STUDENT_COLUMNS} FROM students WHERE roll_number=%s", (roll_number,))
            row = fetchone(cur)
            return row_to_student(row) if row else None

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {STUDENT_COLUMNS} FROM students ORDER BY name ASC, student_id ASC")
            return [row_to_student(r) for r in fetchall(cur)]

    def list_by_ids(self, student_ids: Sequence[int]) -> Sequence[Student]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {STUDENT_COLUMNS} FROM students WHERE student_id IN ({placeholders}) ORDER BY name ASC",
                tuple(ids),
            )
            return [row_to_student(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM students")
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def create_student(
        self,
        *,
        name: str,
        roll_number: str,
        department: str,
        year: int,
        email: str,
        phone_number: Optional[str],
        tokens: TokenBalance,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            with duplicate_key_as(f"Roll number {roll_number} already exists"):
                cur.execute(
                    """
                    INSERT INTO students(name, roll_number, department, study_year, email, phone_number,
                                         breakfast_tokens, lunch_tokens, dinner_tokens, version)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,0)
                    """,
                    (
                        name,
                        roll_number,
                        department,
                        int(year),
                        email,
                        phone_number,
                        tokens.breakfast,
                        tokens.lunch,
                        tokens.dinner,
                    ),
                )
            return int(cur.lastrowid)

    def update_student(
        self,
        *,
        student_id: int,
        name: str,
        roll_number: str,
        department: str,
        year: int,
        email: str,
        phone_number: Optional[str],
        tokens: TokenBalance,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            with duplicate_key_as(f"Roll number {roll_number} already exists"):
                cur.execute(
                    """
                    UPDATE students
                    SET name=%s, roll_number=%s, department=%s, study_year=%s, email=%s, phone_number=%s,
                        breakfast_tokens=%s, lunch_tokens=%s, dinner_tokens=%s, version=version+1
                    WHERE student_id=%s
                    """,
                    (
                        name,
                        roll_number,
                        department,
                        int(year),
                        email,
                        phone_number,
                        tokens.breakfast,
                        tokens.lunch,
                        tokens.dinner,
                        int(student_id),
                    ),
                )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0

    def set_tokens(
        self,
        student_id: int,
        meal_slot: MealSlot,
        new_value: int,
        *,
        expected_version: Optional[int] = None,
    ) -> bool:
        column = TOKEN_COLUMNS[meal_slot]
        sql = f"UPDATE students SET {column}=%s, version=version+1 WHERE student_id=%s"
        params: list[object] = [int(new_value), int(student_id)]
        if expected_version is not None:
            sql += " AND version=%s"
            params.append(int(expected_version))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0
