from __future__ import annotations

from typing import Optional, Protocol

from .model import Admin


class AdminRepository(Protocol):
    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Admin]:
        raise NotImplementedError

    def update_profile(self, admin_id: int, *, name: str, email: str) -> bool:
        raise NotImplementedError

    def update_password_hash(self, admin_id: int, password_hash: str) -> bool:
        raise NotImplementedError
