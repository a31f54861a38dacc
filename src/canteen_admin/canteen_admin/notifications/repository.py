from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..core.enums import NotificationStatus
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        title: str,
        message: str,
        recipients: Sequence[int],
        sent_at: datetime,
        status: NotificationStatus,
    ) -> int:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[Notification]:
        raise NotImplementedError

    def count_by_status(self, status: NotificationStatus) -> int:
        raise NotImplementedError
