from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_caller, query_date, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = token_required(container.identity_service)
    service = container.attendance_service

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    def attendance_status():
        status = service.get_status(current_caller().user_id, query_date())
        return jsonify(status.to_dict())

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def attendance_check_in():
        record = service.check_in(current_caller().user_id)
        return jsonify({"message": "Checked in", "data": record.to_dict()}), 201

    @app.route("/api/attendance/check-out", methods=["PATCH"], endpoint="attendance_check_out")
    @login_required
    def attendance_check_out():
        record = service.check_out(current_caller().user_id)
        return jsonify({"message": "Checked out", "data": record.to_dict()})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        rows = service.history(current_caller().user_id)
        return jsonify([r.to_dict() for r in rows])
