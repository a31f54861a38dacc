from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.validators import require_positive_int
from ..common.web import admin_required, error_response, json_body
from ..container import Container
from ..core.exceptions import ValidationError
from ..recognition.qr_cards import render_card_png
from .model import Student


def student_to_dict(s: Student) -> dict:
    return {
        "id": s.student_id,
        "name": s.name,
        "roll_number": s.roll_number,
        "department": s.department,
        "year": s.year,
        "email": s.email,
        "phone_number": s.phone_number,
        "tokens": s.tokens.as_dict(),
    }


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    def _form_fields(data: dict) -> dict:
        return {
            "name": data.get("name", ""),
            "roll_number": data.get("roll_number", ""),
            "department": data.get("department", ""),
            "year": data.get("year"),
            "email": data.get("email", ""),
            "phone_number": data.get("phone_number"),
        }

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @admin_required
    def list_students():
        try:
            year_s = request.args.get("year", "").strip()
            try:
                year = int(year_s) if year_s else None
            except ValueError:
                raise ValidationError("Year filter must be a number")

            matches = service.search(
                term=request.args.get("q", ""),
                department=request.args.get("department") or None,
                year=year,
            )
            page = service.paginate(matches, require_positive_int(request.args.get("page") or 1, "Page"))
            return jsonify(
                {
                    "success": True,
                    "students": [student_to_dict(s) for s in page.items],
                    "page": page.page,
                    "total_pages": page.total_pages,
                    "total": page.total,
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/students/filters", methods=["GET"], endpoint="student_filters")
    @admin_required
    def student_filters():
        try:
            return jsonify({"success": True, **service.filter_options()})
        except Exception as e:
            return error_response(e)

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    @admin_required
    def add_student():
        try:
            data = json_body()
            student_id = service.create_student(**_form_fields(data), tokens=data.get("tokens"))
            return jsonify({"success": True, "student": student_to_dict(service.get(student_id))}), 201
        except Exception as e:
            return error_response(e)

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="get_student")
    @admin_required
    def get_student(student_id: int):
        try:
            return jsonify({"success": True, "student": student_to_dict(service.get(student_id))})
        except Exception as e:
            return error_response(e)

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="edit_student")
    @admin_required
    def edit_student(student_id: int):
        try:
            data = json_body()
            student = service.update_student(student_id, **_form_fields(data), tokens=data.get("tokens"))
            return jsonify({"success": True, "student": student_to_dict(student)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    @admin_required
    def delete_student(student_id: int):
        try:
            service.delete_student(student_id)
            return jsonify({"success": True})
        except Exception as e:
            return error_response(e)

    @app.route("/api/students/import", methods=["POST"], endpoint="import_students")
    @admin_required
    def import_students():
        try:
            upload = request.files.get("file")
            if upload is None:
                raise ValidationError("Please choose a CSV file")
            text = upload.read().decode("utf-8-sig", errors="replace")
            result = service.import_csv(text)
            return jsonify(
                {
                    "success": True,
                    "message": f"Successfully imported {result.imported} students",
                    "imported": result.imported,
                    "skipped": result.skipped,
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/students/export", methods=["GET"], endpoint="export_students")
    @admin_required
    def export_students():
        try:
            csv_bytes = service.export_csv().encode("utf-8-sig")
            return app.response_class(
                csv_bytes,
                mimetype="text/csv",
                headers={"Content-Disposition": "attachment; filename=students.csv"},
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/students/<int:student_id>/qr", methods=["GET"], endpoint="student_qr")
    @admin_required
    def student_qr(student_id: int):
        try:
            student = service.get(student_id)
            buf = io.BytesIO(render_card_png(student.student_id))
            return send_file(buf, mimetype="image/png", download_name=f"{student.roll_number}.png")
        except Exception as e:
            return error_response(e)
