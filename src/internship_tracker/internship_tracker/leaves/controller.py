from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_caller, parse_body, token_required
from ..container import Container
from ..core.enums import Role
from .schemas import LeaveDecisionSchema, LeaveRequestSchema


def register(app: Flask, container: Container) -> None:
    login_required = token_required(container.identity_service)
    reviewer_required = token_required(container.identity_service, {Role.ADMIN, Role.SUPERVISOR})
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_create")
    @login_required
    def leave_create():
        body = parse_body(LeaveRequestSchema)
        leave = service.request_leave(caller=current_caller(), leave_date=body.date, reason=body.reason)
        return jsonify({"message": "Leave request submitted", "data": leave.to_dict()}), 201

    @app.route("/api/leaves/history", methods=["GET"], endpoint="leave_history")
    @login_required
    def leave_history():
        rows = service.history(current_caller().user_id)
        return jsonify([r.to_dict() for r in rows])

    @app.route("/api/leaves/<int:request_id>", methods=["GET"], endpoint="leave_detail")
    @login_required
    def leave_detail(request_id: int):
        leave = service.get_leave(caller=current_caller(), request_id=request_id)
        return jsonify(leave.to_dict())

    @app.route("/api/leaves/<int:request_id>/status", methods=["PATCH"], endpoint="leave_decide")
    @reviewer_required
    def leave_decide(request_id: int):
        body = parse_body(LeaveDecisionSchema)
        leave = service.decide_leave(
            caller=current_caller(),
            request_id=request_id,
            decision=body.status.strip().upper(),
            note=body.note,
        )
        return jsonify({"message": f"Leave request {leave.status.value.lower()}", "data": leave.to_dict()})
