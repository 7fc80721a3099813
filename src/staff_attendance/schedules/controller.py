from __future__ import annotations

from flask import Flask, jsonify

from ..common.decorators import current_viewer, role_required
from ..common.serialization import to_dict
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/my-schedules", methods=["GET"], endpoint="api_my_schedules")
    @role_required(Role.TEACHER)
    def my_schedules():
        schedules = container.schedules_repo.list_for_teacher(current_viewer().user_id)
        return jsonify([to_dict(s) for s in schedules])
