from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_caller, parse_body, token_required
from ..container import Container
from ..core.enums import Role
from ..identity.schemas import LoginSchema, RegisterSchema
from .schemas import CreateSupervisorSchema, CreateUserSchema, ProfileUpdateSchema, SetActiveSchema
from .service import ProfileUpdate


def register(app: Flask, container: Container) -> None:
    login_required = token_required(container.identity_service)
    admin_required = token_required(container.identity_service, {Role.ADMIN})
    supervisor_required = token_required(container.identity_service, {Role.SUPERVISOR})

    # ----- auth -----

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        body = parse_body(RegisterSchema)
        user_id = container.auth_service.register(
            full_name=body.full_name,
            identifier=body.identifier,
            email=body.email,
            password=body.password,
        )
        return jsonify({"message": "Registration successful", "id": user_id}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        body = parse_body(LoginSchema)
        result = container.auth_service.login(body.identifier, body.password)
        return jsonify({"message": "Login successful", "token": result.token, "user": result.user})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def auth_me():
        return jsonify(container.auth_service.me(current_caller()))

    # ----- own profile -----

    @app.route("/api/profile/me", methods=["GET"], endpoint="profile_get")
    @login_required
    def profile_get():
        return jsonify(container.profile_service.get_profile(caller=current_caller()))

    @app.route("/api/profile/me", methods=["PUT"], endpoint="profile_update")
    @login_required
    def profile_update():
        body = parse_body(ProfileUpdateSchema)
        container.profile_service.update_profile(caller=current_caller(), update=ProfileUpdate(**body.model_dump()))
        return jsonify({"message": "Profile saved"})

    # ----- admin -----

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        return jsonify(container.user_service.list_students(caller=current_caller()))

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_users_create")
    @admin_required
    def admin_users_create():
        body = parse_body(CreateUserSchema)
        user_id = container.user_service.create_user(
            caller=current_caller(),
            identifier=body.identifier,
            password=body.password,
            role=body.role,
            email=body.email,
            full_name=body.full_name,
        )
        return jsonify({"message": "User created", "id": user_id}), 201

    @app.route("/api/admin/users/<identifier>", methods=["GET"], endpoint="admin_user_detail")
    @admin_required
    def admin_user_detail(identifier: str):
        return jsonify(container.user_service.get_student(caller=current_caller(), identifier=identifier))

    @app.route("/api/admin/users/<int:user_id>/active", methods=["PATCH"], endpoint="admin_user_active")
    @admin_required
    def admin_user_active(user_id: int):
        body = parse_body(SetActiveSchema)
        container.user_service.set_active(caller=current_caller(), user_id=user_id, is_active=body.is_active)
        return jsonify({"message": "User activated" if body.is_active else "User deactivated"})

    @app.route("/api/admin/supervisors", methods=["GET"], endpoint="admin_supervisors")
    @admin_required
    def admin_supervisors():
        return jsonify(container.user_service.list_supervisors(caller=current_caller()))

    @app.route("/api/admin/supervisors", methods=["POST"], endpoint="admin_supervisors_create")
    @admin_required
    def admin_supervisors_create():
        body = parse_body(CreateSupervisorSchema)
        user_id = container.user_service.create_supervisor(
            caller=current_caller(),
            identifier=body.identifier,
            password=body.password,
            full_name=body.full_name,
            email=body.email,
            phone=body.phone,
            division=body.division,
        )
        return jsonify({"message": "Supervisor created", "id": user_id}), 201

    @app.route("/api/admin/supervisors/summary", methods=["GET"], endpoint="admin_supervisors_summary")
    @admin_required
    def admin_supervisors_summary():
        return jsonify(container.user_service.supervisor_summary(caller=current_caller()))

    # ----- supervisor -----

    @app.route("/api/supervisor/students", methods=["GET"], endpoint="supervisor_students")
    @supervisor_required
    def supervisor_students():
        return jsonify(container.user_service.list_my_students(caller=current_caller()))
