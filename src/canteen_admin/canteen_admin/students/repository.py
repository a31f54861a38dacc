from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import MealSlot
from .model import Student, TokenBalance


class StudentRepository(Protocol):
    """Repository interface for the student roster.

    The service layer depends on this interface, never on a concrete DB.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_ids(self, student_ids: Sequence[int]) -> Sequence[Student]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

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
        raise NotImplementedError

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
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError

    def set_tokens(
        self,
        student_id: int,
        meal_slot: MealSlot,
        new_value: int,
        *,
        expected_version: Optional[int] = None,
    ) -> bool:
        """Write one token count; when `expected_version` is given the write only
        applies if the row is still at that version."""

        raise NotImplementedError
