from __future__ import annotations

from enum import Enum


class MealSlot(str, Enum):
    """Meal slot: the unit of attendance and token consumption."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"

    @classmethod
    def parse(cls, value: str) -> "MealSlot":
        from .exceptions import ValidationError

        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            raise ValidationError(f"Invalid meal type: {value!r}")


class AdminRole(str, Enum):
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class NotificationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class DenialReason(str, Enum):
    """Machine-readable reason attached to a denied admission."""

    NO_TOKENS_AVAILABLE = "NO_TOKENS_AVAILABLE"
    ALREADY_MARKED = "ALREADY_MARKED"
