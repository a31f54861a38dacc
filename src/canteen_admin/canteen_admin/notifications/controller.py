from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_non_negative_int, require_positive_int
from ..common.web import admin_required, error_response, json_body
from ..container import Container
from ..core.constants import DEFAULT_LOW_TOKEN_THRESHOLD
from ..core.enums import MealSlot
from .service import notification_to_dict


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="list_notifications")
    @admin_required
    def list_notifications():
        try:
            items = service.list_recent(require_positive_int(request.args.get("limit", 50), "Limit"))
            return jsonify({"success": True, "notifications": [notification_to_dict(n) for n in items]})
        except Exception as e:
            return error_response(e)

    @app.route("/api/notifications", methods=["POST"], endpoint="send_notification")
    @admin_required
    def send_notification():
        try:
            data = json_body()
            notification_id = service.send(
                title=data.get("title", ""),
                message=data.get("message", ""),
                recipients=data.get("recipients") or [],
            )
            return jsonify({"success": True, "id": notification_id, "message": "Notification sent successfully"}), 201
        except Exception as e:
            return error_response(e)

    @app.route("/api/notifications/drafts/missed-meal", methods=["POST"], endpoint="draft_missed_meal")
    @admin_required
    def draft_missed_meal():
        try:
            data = json_body()
            year = data.get("year")
            draft = service.draft_missed_meal(
                MealSlot.parse(data.get("meal_type", "")),
                department=data.get("department") or None,
                year=require_positive_int(year, "Year") if year else None,
            )
            return jsonify({"success": True, "title": draft.title, "message": draft.message, "recipients": draft.recipients})
        except Exception as e:
            return error_response(e)

    @app.route("/api/notifications/drafts/low-tokens", methods=["POST"], endpoint="draft_low_tokens")
    @admin_required
    def draft_low_tokens():
        try:
            data = json_body()
            draft = service.draft_low_tokens(threshold=require_non_negative_int(data.get("threshold", DEFAULT_LOW_TOKEN_THRESHOLD), "Threshold"))
            return jsonify({"success": True, "title": draft.title, "message": draft.message, "recipients": draft.recipients})
        except Exception as e:
            return error_response(e)
