from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_caller, query_date, token_required
from ..container import Container
from ..core.enums import Role
from .service import parse_entity


def register(app: Flask, container: Container) -> None:
    login_required = token_required(container.identity_service)
    reviewer_required = token_required(container.identity_service, {Role.ADMIN, Role.SUPERVISOR})
    reports = container.report_service
    dashboards = container.dashboard_service

    @app.route("/api/reports/<entity>", methods=["GET"], endpoint="report_list")
    @login_required
    def report_list(entity: str):
        rows = reports.list_scoped(caller=current_caller(), entity=parse_entity(entity), on_date=query_date())
        return jsonify(rows)

    @app.route("/api/reports/<entity>/export", methods=["GET"], endpoint="report_export")
    @reviewer_required
    def report_export(entity: str):
        doc = reports.export(
            caller=current_caller(),
            entity=parse_entity(entity),
            on_date=query_date(),
            fmt=request.args.get("format") or "pdf",
        )
        return app.response_class(
            doc.content,
            mimetype=doc.mimetype,
            headers={"Content-Disposition": f"attachment; filename={doc.filename}"},
        )

    @app.route("/api/dashboard/student", methods=["GET"], endpoint="dashboard_student")
    @token_required(container.identity_service, {Role.STUDENT})
    def dashboard_student():
        return jsonify(dashboards.student(caller=current_caller()))

    @app.route("/api/dashboard/admin", methods=["GET"], endpoint="dashboard_admin")
    @token_required(container.identity_service, {Role.ADMIN})
    def dashboard_admin():
        return jsonify(dashboards.admin(caller=current_caller()))

    @app.route("/api/dashboard/supervisor", methods=["GET"], endpoint="dashboard_supervisor")
    @token_required(container.identity_service, {Role.SUPERVISOR})
    def dashboard_supervisor():
        return jsonify(dashboards.supervisor(caller=current_caller()))
