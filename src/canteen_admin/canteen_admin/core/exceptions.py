from __future__ import annotations

from .enums import DenialReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a known admin is not allowed in (account disabled)."""


class StudentNotFound(ValidationError):
    """Raised when a student id does not resolve to a roster entry."""

    def __init__(self, student_id):
        super().__init__(f"Student {student_id} not found")
        self.student_id = student_id


class IdentityNotRecognized(DomainError):
    """Raised when the identifier finds no student in the captured image."""


class StoreUnavailable(DomainError):
    """Transient record store failure or timeout. Callers may retry the whole operation."""


class AdmissionConflict(DomainError):
    """A transactional commit lost a race against another admission."""

    def __init__(self, reason: DenialReason, message: str = ""):
        super().__init__(message or reason.value)
        self.reason = reason
