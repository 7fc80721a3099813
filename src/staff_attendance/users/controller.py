from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.decorators import current_viewer, login_required, role_required, store_session_user
from ..common.http import json_body
from ..common.serialization import to_dict
from ..core.enums import Role
from ..container import Container
from .model import User


def user_json(user: User) -> dict:
    return to_dict(user, exclude=("password_hash",))


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("uniqueId"), data.get("password"))
        store_session_user(user)
        app.logger.info("login %s (%s)", user.unique_id, user.role.value)
        return jsonify({"id": user.user_id, "role": user.role.value, "name": user.name, "uniqueId": user.unique_id})

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        user = container.auth_service.current_user(current_viewer().user_id)
        return jsonify(user_json(user))

    @app.route("/api/users", methods=["GET"], endpoint="api_users")
    @login_required
    def list_users():
        users = container.user_service.list_visible(current_viewer())
        return jsonify([user_json(u) for u in users])

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @role_required(Role.ADMIN)
    def create_user():
        user = container.user_service.create_user(current_viewer(), json_body())
        return jsonify(user_json(user)), 201

    @app.route("/api/user/<int:user_id>", methods=["GET"], endpoint="api_user_get")
    @role_required(Role.ADMIN)
    def get_user(user_id: int):
        return jsonify(user_json(container.user_service.get_user(current_viewer(), user_id)))

    @app.route("/api/user/<int:user_id>", methods=["PUT"], endpoint="api_user_update")
    @role_required(Role.ADMIN)
    def update_user(user_id: int):
        user = container.user_service.update_user(current_viewer(), user_id, json_body())
        return jsonify(user_json(user))

    @app.route("/api/user/<int:user_id>", methods=["DELETE"], endpoint="api_user_delete")
    @role_required(Role.ADMIN)
    def delete_user(user_id: int):
        container.user_service.delete_user(current_viewer(), user_id)
        return jsonify({"message": "User deleted successfully"})

    @app.route("/api/users/<int:user_id>/reset-password", methods=["POST"], endpoint="api_user_reset_password")
    @role_required(Role.ADMIN)
    def reset_password(user_id: int):
        container.user_service.reset_password(current_viewer(), user_id, json_body().get("newPassword"))
        return jsonify({"message": "Password reset successfully"})

    @app.route("/api/departments", methods=["GET"], endpoint="api_departments")
    @login_required
    def departments():
        return jsonify([to_dict(d) for d in container.user_service.list_departments()])
