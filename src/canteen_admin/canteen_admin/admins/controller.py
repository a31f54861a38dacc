from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import admin_required, error_response, json_body
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from .service import SessionAdmin


def register(app: Flask, container: Container) -> None:
    def _remember(s_admin: SessionAdmin) -> None:
        session["admin_id"] = s_admin.admin_id
        session["name"] = s_admin.name
        session["email"] = s_admin.email
        session["role"] = s_admin.role.value

    def _me() -> dict:
        return {
            "id": session.get("admin_id"),
            "name": session.get("name"),
            "email": session.get("email"),
            "role": session.get("role"),
        }

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        try:
            data = json_body()
            s_admin = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

            session.permanent = bool(data.get("remember"))
            app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
            _remember(s_admin)
            return jsonify({"success": True, "admin": _me()})
        except Exception as e:
            return error_response(e)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @admin_required
    def me():
        return jsonify({"success": True, "admin": _me()})

    @app.route("/api/settings/profile", methods=["PUT"], endpoint="update_profile")
    @admin_required
    def update_profile():
        try:
            data = json_body()
            s_admin = container.settings_service.update_profile(
                int(session["admin_id"]),
                name=data.get("name", ""),
                email=data.get("email", ""),
            )
            _remember(s_admin)
            return jsonify({"success": True, "admin": _me(), "message": "Profile updated successfully"})
        except Exception as e:
            return error_response(e)

    @app.route("/api/settings/password", methods=["PUT"], endpoint="change_password")
    @admin_required
    def change_password():
        try:
            data = json_body()
            container.settings_service.change_password(
                int(session["admin_id"]),
                current_password=data.get("current_password", ""),
                new_password=data.get("new_password", ""),
                confirm_password=data.get("confirm_password", ""),
            )
            return jsonify({"success": True, "message": "Password updated successfully"})
        except Exception as e:
            return error_response(e)
