from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.web import admin_required, error_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @admin_required
    def dashboard():
        try:
            return jsonify({"success": True, **asdict(container.dashboard_service.summary())})
        except Exception as e:
            return error_response(e)
