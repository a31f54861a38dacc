from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Sequence

from ..core.enums import NotificationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    """Notifications live in `notifications`, recipients in `notification_recipients`."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        title: str,
        message: str,
        recipients: Sequence[int],
        sent_at: datetime,
        status: NotificationStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(title, message, sent_at, status)
                VALUES(%s,%s,%s,%s)
                """,
                (title, message, sent_at, status.value),
            )
            notification_id = int(cur.lastrowid)
            cur.executemany(
                "INSERT INTO notification_recipients(notification_id, student_id) VALUES(%s,%s)",
                [(notification_id, int(sid)) for sid in recipients],
            )
            return notification_id

    def _recipients_for(self, cur, ids: list[int]) -> dict[int, list[int]]:
        if not ids:
            return {}
        placeholders = ",".join(["%s"] * len(ids))
        cur.execute(
            f"""
            SELECT notification_id, student_id
            FROM notification_recipients
            WHERE notification_id IN ({placeholders})
            ORDER BY student_id ASC
            """,
            tuple(ids),
        )
        out: dict[int, list[int]] = defaultdict(list)
        for r in fetchall(cur):
            out[int(r["notification_id"])].append(int(r["student_id"]))
        return out

    def list_recent(self, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, title, message, sent_at, status
                FROM notifications
                ORDER BY sent_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            rows = fetchall(cur)
            recipients = self._recipients_for(cur, [int(r["notification_id"]) for r in rows])
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    title=r["title"],
                    message=r["message"],
                    recipients=tuple(recipients.get(int(r["notification_id"]), [])),
                    sent_at=r["sent_at"],
                    status=NotificationStatus(r["status"]),
                )
                for r in rows
            ]

    def count_by_status(self, status: NotificationStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM notifications WHERE status=%s", (status.value,))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

