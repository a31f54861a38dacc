"""Canteen Admin package.

Feature modules (students, attendance, notifications, admins, dashboard) each
carry their own model/repository/service layers behind a thin Flask controller.
"""
