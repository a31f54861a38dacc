from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_non_negative_int, require_positive_int
from ..core.constants import STUDENTS_PER_PAGE
from ..core.exceptions import StudentNotFound, ValidationError
from . import csv_io
from .model import Student, TokenBalance
from .repository import StudentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentPage:
    items: list[Student]
    page: int
    total_pages: int
    total: int


@dataclass(frozen=True)
class ImportResult:
    imported: int
    skipped: int
    student_ids: list[int]


def _tokens_from(raw: Optional[dict]) -> TokenBalance:
    raw = raw or {}
    return TokenBalance(
        breakfast=require_non_negative_int(raw.get("breakfast", 0), "Breakfast tokens"),
        lunch=require_non_negative_int(raw.get("lunch", 0), "Lunch tokens"),
        dinner=require_non_negative_int(raw.get("dinner", 0), "Dinner tokens"),
    )


class StudentService:
    """Use case: manage the student roster (admin)."""

    def __init__(self, students: StudentRepository, *, page_size: int = STUDENTS_PER_PAGE):
        self._students = students
        self._page_size = int(page_size)

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise StudentNotFound(student_id)
        return student

    def create_student(
        self,
        *,
        name: str,
        roll_number: str,
        department: str,
        year,
        email: str,
        phone_number: Optional[str] = None,
        tokens: Optional[dict] = None,
    ) -> int:
        name = require_non_empty(name, "Name")
        roll_number = require_non_empty(roll_number, "Roll number")
        department = require_non_empty(department, "Department")
        email = require_non_empty(email, "Email")
        year = require_positive_int(year, "Year")
        balance = _tokens_from(tokens)

        if self._students.get_by_roll_number(roll_number):
            raise ValidationError(f"Roll number {roll_number} already exists")

        student_id = self._students.create_student(
            name=name,
            roll_number=roll_number,
            department=department,
            year=year,
            email=email,
            phone_number=(phone_number or "").strip() or None,
            tokens=balance,
        )
        logger.info("Created student %s (%s)", student_id, roll_number)
        return student_id

    def update_student(
        self,
        student_id: int,
        *,
        name: str,
        roll_number: str,
        department: str,
        year,
        email: str,
        phone_number: Optional[str] = None,
        tokens: Optional[dict] = None,
    ) -> Student:
        current = self.get(student_id)

        name = require_non_empty(name, "Name")
        roll_number = require_non_empty(roll_number, "Roll number")
        department = require_non_empty(department, "Department")
        email = require_non_empty(email, "Email")
        year = require_positive_int(year, "Year")
        balance = _tokens_from(tokens) if tokens is not None else current.tokens

        other = self._students.get_by_roll_number(roll_number)
        if other and other.student_id != current.student_id:
            raise ValidationError(f"Roll number {roll_number} already exists")

        if not self._students.update_student(
            student_id=current.student_id,
            name=name,
            roll_number=roll_number,
            department=department,
            year=year,
            email=email,
            phone_number=(phone_number or "").strip() or None,
            tokens=balance,
        ):
            raise StudentNotFound(student_id)
        return self.get(student_id)

    def delete_student(self, student_id: int) -> None:
        if not self._students.delete_by_id(int(student_id)):
            raise StudentNotFound(student_id)
        logger.info("Deleted student %s", student_id)

    def search(
        self,
        *,
        term: str = "",
        department: Optional[str] = None,
        year: Optional[int] = None,
    ) -> list[Student]:
        result = list(self._students.list_all())

        term = (term or "").strip().lower()
        if term:
            result = [
                s
                for s in result
                if term in s.name.lower() or term in s.roll_number.lower() or term in s.email.lower()
            ]
        if department:
            result = [s for s in result if s.department == department]
        if year:
            result = [s for s in result if s.year == int(year)]
        return result

    def paginate(self, students: Sequence[Student], page: int = 1) -> StudentPage:
        total = len(students)
        total_pages = max(1, math.ceil(total / self._page_size))
        page = min(max(1, int(page)), total_pages)
        start = (page - 1) * self._page_size
        return StudentPage(
            items=list(students[start : start + self._page_size]),
            page=page,
            total_pages=total_pages,
            total=total,
        )

    def filter_options(self) -> dict:
        students = self._students.list_all()
        return {
            "departments": sorted({s.department for s in students}),
            "years": sorted({s.year for s in students}),
        }

    def import_csv(self, text: str) -> ImportResult:
        if not text or not text.strip():
            raise ValidationError("The CSV file is empty")

        drafts = csv_io.parse_csv(text)
        valid = [d for d in drafts if d.is_complete]
        if not valid:
            raise ValidationError("No valid student data found in the CSV file")

        ids: list[int] = []
        skipped = len(drafts) - len(valid)
        for d in valid:
            if self._students.get_by_roll_number(d.roll_number):
                skipped += 1
                continue
            ids.append(
                self._students.create_student(
                    name=d.name,
                    roll_number=d.roll_number,
                    department=d.department,
                    year=d.year,
                    email=d.email,
                    phone_number=d.phone_number,
                    tokens=d.tokens,
                )
            )

        logger.info("Imported %d students from CSV (%d skipped)", len(ids), skipped)
        return ImportResult(imported=len(ids), skipped=skipped, student_ids=ids)

    def export_csv(self) -> str:
        return csv_io.write_csv(self._students.list_all())
