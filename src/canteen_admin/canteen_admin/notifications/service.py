from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.service import AttendanceQueryService
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LOW_TOKEN_THRESHOLD, DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import MealSlot, NotificationStatus
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository
from .model import Notification, NotificationDraft
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Use case: compose and record broadcast notifications.

    Delivery is out of band; a stored notification is recorded as sent.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        students: StudentRepository,
        attendance: AttendanceQueryService,
    ):
        self._notifications = notifications
        self._students = students
        self._attendance = attendance

    def send(self, *, title: str, message: str, recipients: Sequence[int], now: Optional[datetime] = None) -> int:
        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")

        try:
            ids = sorted({int(r) for r in recipients or []})
        except (TypeError, ValueError):
            raise ValidationError("Recipients must be student ids")
        if not ids:
            raise ValidationError("Please select at least one recipient")

        known = {s.student_id for s in self._students.list_by_ids(ids)}
        missing = [i for i in ids if i not in known]
        if missing:
            raise ValidationError(f"Unknown recipients: {', '.join(str(i) for i in missing)}")

        notification_id = self._notifications.create(
            title=title,
            message=message,
            recipients=ids,
            sent_at=now or now_local(),
            status=NotificationStatus.SENT,
        )
        logger.info("Notification %s recorded for %d recipients", notification_id, len(ids))
        return notification_id

    def list_recent(self, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> list[Notification]:
        return list(self._notifications.list_recent(limit))

    def pending_count(self) -> int:
        return self._notifications.count_by_status(NotificationStatus.PENDING)

    def draft_missed_meal(
        self,
        meal_type: MealSlot,
        *,
        day: Optional[date] = None,
        department: Optional[str] = None,
        year: Optional[int] = None,
    ) -> NotificationDraft:
        day = day or now_local().date()
        attended = self._attendance.student_ids_attended(meal_type, day)

        missed = [
            s.student_id
            for s in self._students.list_all()
            if s.student_id not in attended
            and (not department or s.department == department)
            and (not year or s.year == int(year))
        ]
        label = meal_type.value
        return NotificationDraft(
            title=f"Missed {label.capitalize()} Attendance",
            message=(
                f"This is a reminder that you missed your {label} attendance today. "
                "Please ensure you mark your attendance for future meals."
            ),
            recipients=missed,
        )

    def draft_low_tokens(self, *, threshold: int = DEFAULT_LOW_TOKEN_THRESHOLD) -> NotificationDraft:
        low = [
            s.student_id
            for s in self._students.list_all()
            if any(s.tokens.get(slot) < threshold for slot in MealSlot)
        ]
        return NotificationDraft(
            title="Low Token Balance",
            message=(
                "Your meal token balance is running low. "
                "Please contact the canteen administrator to recharge your tokens."
            ),
            recipients=low,
        )


def notification_to_dict(n: Notification) -> dict:
    return {
        "id": n.notification_id,
        "title": n.title,
        "message": n.message,
        "recipients": list(n.recipients),
        "sent_at": n.sent_at.isoformat(),
        "status": n.status.value,
    }
