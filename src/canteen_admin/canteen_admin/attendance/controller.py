from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import meal_slot_for, now_local
from ..common.web import admin_required, error_response, json_body
from ..container import Container
from ..core.enums import MealSlot
from ..core.exceptions import ValidationError
from .service import result_to_dict


def register(app: Flask, container: Container) -> None:
    admissions = container.admission_service
    queries = container.attendance_query_service

    def _meal(value) -> MealSlot | None:
        return MealSlot.parse(value) if value else None

    def _student_id(raw) -> int:
        # bool is an int subclass; floats are rejected.
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, str) and raw.strip().isdigit():
            return int(raw.strip())
        raise ValidationError("student_id must be a whole number")

    def _respond(result):
        # Denials are normal outcomes; 409 tells the kiosk nothing was recorded.
        return jsonify({"success": result.admitted, **result_to_dict(result)}), (200 if result.admitted else 409)

    @app.route("/api/attendance/current-meal", methods=["GET"], endpoint="current_meal")
    @admin_required
    def current_meal():
        now = now_local()
        return jsonify({"success": True, "meal_type": meal_slot_for(now).value, "now": now.isoformat()})

    @app.route("/api/attendance/admit", methods=["POST"], endpoint="admit_student")
    @admin_required
    def admit_student():
        try:
            data = json_body()
            result = admissions.admit(_student_id(data.get("student_id")), _meal(data.get("meal_type")))
            return _respond(result)
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/recognize", methods=["POST"], endpoint="recognize_student")
    @admin_required
    def recognize_student():
        """Kiosk capture: identify the student in the frame, then admit."""
        try:
            upload = request.files.get("image")
            if upload is None:
                raise ValidationError("Please attach the captured image")
            result = admissions.admit_image(upload.read(), _meal(request.form.get("meal_type")))
            return _respond(result)
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @admin_required
    def attendance_today():
        try:
            return jsonify({"success": True, **queries.counts_for_day(now_local().date())})
        except Exception as e:
            return error_response(e)
