from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..core.enums import MealSlot


@dataclass(frozen=True)
class TokenBalance:
    """Per-meal token counts. Each value is a non-negative integer."""

    breakfast: int = 0
    lunch: int = 0
    dinner: int = 0

    def get(self, slot: MealSlot) -> int:
        return int(getattr(self, slot.value))

    def with_value(self, slot: MealSlot, value: int) -> "TokenBalance":
        return replace(self, **{slot.value: int(value)})

    def as_dict(self) -> dict:
        return {"breakfast": self.breakfast, "lunch": self.lunch, "dinner": self.dinner}


@dataclass(frozen=True)
class Student:
    """Domain entity: a roster entry.

    `version` increments on every token change so writers can detect
    concurrent updates.
    """

    student_id: int
    name: str
    roll_number: str
    department: str
    year: int
    email: str
    phone_number: Optional[str]
    tokens: TokenBalance
    version: int = 0

    def with_tokens(self, tokens: TokenBalance) -> "Student":
        return replace(self, tokens=tokens, version=self.version + 1)
