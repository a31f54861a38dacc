"""Helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    IdentityNotRecognized,
    StoreUnavailable,
    StudentNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (StudentNotFound, 404),
    (IdentityNotRecognized, 404),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (StoreUnavailable, 503),
]


def error_response(error: Exception):
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(error, kind):
            return jsonify({"success": False, "error": type(error).__name__, "message": str(error)}), status

    if isinstance(error, DomainError):
        return jsonify({"success": False, "error": type(error).__name__, "message": str(error)}), 400

    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"success": False, "error": "InternalError", "message": "Internal server error"}), 500


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "admin_id" not in session:
            return jsonify({"success": False, "error": "AuthenticationError", "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
