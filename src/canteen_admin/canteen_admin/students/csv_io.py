"""CSV import/export for the roster.

Import columns (positional): name, roll number, department, year, email,
phone, breakfast, lunch, dinner. A leading header row is detected by its first
cell being "name"/"Name".
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .model import Student, TokenBalance

EXPORT_HEADERS = [
    "Name",
    "Roll Number",
    "Department",
    "Year",
    "Email",
    "Phone Number",
    "Breakfast Tokens",
    "Lunch Tokens",
    "Dinner Tokens",
]


@dataclass(frozen=True)
class StudentDraft:
    """Parsed-but-unsaved roster row."""

    name: str
    roll_number: str
    department: str
    year: int
    email: str
    phone_number: Optional[str]
    tokens: TokenBalance

    @property
    def is_complete(self) -> bool:
        return bool(self.name and self.roll_number and self.email)


def _cell(row: Sequence[str], index: int) -> str:
    return row[index].strip() if index < len(row) and row[index] else ""


def _int_or(value: str, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_rows(rows: Iterable[Sequence[str]]) -> list[StudentDraft]:
    drafts: list[StudentDraft] = []
    for index, row in enumerate(rows):
        if not row or not any(c.strip() for c in row):
            continue
        if index == 0 and _cell(row, 0) in {"name", "Name"}:
            continue

        drafts.append(
            StudentDraft(
                name=_cell(row, 0),
                roll_number=_cell(row, 1),
                department=_cell(row, 2),
                year=max(_int_or(_cell(row, 3), 1), 1),
                email=_cell(row, 4),
                phone_number=_cell(row, 5) or None,
                tokens=TokenBalance(
                    breakfast=max(_int_or(_cell(row, 6), 0), 0),
                    lunch=max(_int_or(_cell(row, 7), 0), 0),
                    dinner=max(_int_or(_cell(row, 8), 0), 0),
                ),
            )
        )
    return drafts


def parse_csv(text: str) -> list[StudentDraft]:
    return parse_rows(csv.reader(io.StringIO(text)))


def write_csv(students: Iterable[Student]) -> str:
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for s in students:
        writer.writerow(
            [
                s.name,
                s.roll_number,
                s.department,
                s.year,
                s.email,
                s.phone_number or "",
                s.tokens.breakfast,
                s.tokens.lunch,
                s.tokens.dinner,
            ]
        )
    return out.getvalue()
