from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AdminRole
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import Admin
from .repository import AdminRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionAdmin:
    """What we store into the Flask session after login."""

    admin_id: int
    name: str
    email: str
    role: AdminRole


def _verify(admin: Admin, password: str) -> bool:
    try:
        return check_password_hash(admin.password_hash, password or "")
    except ValueError:
        # placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use case: authenticate an admin (login)."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def authenticate(self, email: str, password: str) -> SessionAdmin:
        admin = self._admins.get_by_email((email or "").strip().lower())
        if not admin or not _verify(admin, password):
            logger.info("Rejected login for %r", email)
            raise AuthenticationError("Invalid email or password")
        if not admin.is_active:
            logger.info("Disabled admin %s tried to sign in", admin.admin_id)
            raise AuthorizationError("This admin account is disabled")

        return SessionAdmin(admin_id=admin.admin_id, name=admin.name, email=admin.email, role=admin.role)


class SettingsService:
    """Use case: the signed-in admin edits their own profile and password."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def _get(self, admin_id: int) -> Admin:
        admin = self._admins.get_by_id(int(admin_id))
        if not admin:
            raise ValidationError("Admin account not found")
        return admin

    def update_profile(self, admin_id: int, *, name: str, email: str) -> SessionAdmin:
        admin = self._get(admin_id)
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Email is not valid")

        other = self._admins.get_by_email(email)
        if other and other.admin_id != admin.admin_id:
            raise ValidationError("Email is already in use")

        self._admins.update_profile(admin.admin_id, name=name, email=email)
        return SessionAdmin(admin_id=admin.admin_id, name=name, email=email, role=admin.role)

    def change_password(self, admin_id: int, *, current_password: str, new_password: str, confirm_password: str) -> None:
        admin = self._get(admin_id)
        if not _verify(admin, current_password):
            raise AuthenticationError("Current password is incorrect")

        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        if new_password != confirm_password:
            raise ValidationError("New passwords do not match")

        self._admins.update_password_hash(admin.admin_id, generate_password_hash(new_password))
        logger.info("Admin %s changed their password", admin.admin_id)
