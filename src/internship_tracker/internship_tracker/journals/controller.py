from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_caller, parse_body, token_required
from ..container import Container
from ..core.enums import Role
from .schemas import JournalReviewSchema, JournalSubmitSchema


def register(app: Flask, container: Container) -> None:
    login_required = token_required(container.identity_service)
    student_required = token_required(container.identity_service, {Role.STUDENT})
    reviewer_required = token_required(container.identity_service, {Role.ADMIN, Role.SUPERVISOR})
    service = container.journal_service

    @app.route("/api/journals", methods=["POST"], endpoint="journal_create")
    @student_required
    def journal_create():
        body = parse_body(JournalSubmitSchema)
        entry = service.submit(
            caller=current_caller(),
            entry_date=body.date,
            activity=body.activity,
            description=body.description,
            hours=body.hours,
            obstacles=body.obstacles,
            next_plan=body.next_plan,
        )
        return jsonify({"message": "Journal submitted", "data": entry.to_dict()}), 201

    @app.route("/api/journals", methods=["GET"], endpoint="journal_list_mine")
    @student_required
    def journal_list_mine():
        return jsonify([j.to_dict() for j in service.list_mine(caller=current_caller())])

    @app.route("/api/journals/<int:entry_id>", methods=["GET"], endpoint="journal_detail")
    @login_required
    def journal_detail(entry_id: int):
        entry = service.get_entry(caller=current_caller(), entry_id=entry_id)
        return jsonify(entry.to_dict())

    @app.route("/api/journals/<int:entry_id>/status", methods=["PATCH"], endpoint="journal_review")
    @reviewer_required
    def journal_review(entry_id: int):
        body = parse_body(JournalReviewSchema)
        entry = service.review(
            caller=current_caller(),
            entry_id=entry_id,
            decision=body.status.strip().upper(),
            comment=body.comment,
        )
        return jsonify({"message": "Journal reviewed", "data": entry.to_dict()})
