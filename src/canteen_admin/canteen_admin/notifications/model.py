from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import NotificationStatus


@dataclass(frozen=True)
class Notification:
    notification_id: int
    title: str
    message: str
    recipients: tuple[int, ...]
    sent_at: datetime
    status: NotificationStatus


@dataclass(frozen=True)
class NotificationDraft:
    """Pre-filled compose form; nothing is stored until it is sent."""

    title: str
    message: str
    recipients: list[int]
