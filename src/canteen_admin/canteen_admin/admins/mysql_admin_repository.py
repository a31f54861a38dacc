from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.enums import AdminRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_as, fetchone
from .model import Admin
from .repository import AdminRepository


def _row_to_admin(row: Dict[str, Any]) -> Admin:
    return Admin(
        admin_id=int(row["admin_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=AdminRole(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT admin_id, name, email, password_hash, role, is_active
                FROM admins
                WHERE admin_id=%s
                """,
                (int(admin_id),),
            )
            row = fetchone(cur)
            return _row_to_admin(row) if row else None

    def get_by_email(self, email: str) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT admin_id, name, email, password_hash, role, is_active
                FROM admins
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return _row_to_admin(row) if row else None

    def update_profile(self, admin_id: int, *, name: str, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            with duplicate_key_as("Email is already in use"):
                cur.execute("UPDATE admins SET name=%s, email=%s WHERE admin_id=%s", (name, email, int(admin_id)))
            return cur.rowcount > 0

    def update_password_hash(self, admin_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE admins SET password_hash=%s WHERE admin_id=%s", (password_hash, int(admin_id)))
            return cur.rowcount > 0
