from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AdminRole


@dataclass(frozen=True)
class Admin:
    """Domain entity: a dashboard operator account.

    Plain data object, no DB access here.
    """

    admin_id: int
    name: str
    email: str
    password_hash: str
    role: AdminRole
    is_active: bool = True
