from __future__ import annotations

from functools import wraps

from flask import current_app, g, jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..users.model import SessionUser

CONTAINER_KEY = "staff_attendance.container"


def store_session_user(user: SessionUser) -> None:
    session.clear()
    session.permanent = True
    session["user_id"] = user.user_id
    session["unique_id"] = user.unique_id


def current_viewer() -> SessionUser:
    """The logged-in user as loaded for this request. Call only behind login_required."""
    return g.viewer


def _load_viewer() -> bool:
    # role, department and status are re-read on every request
    container = current_app.extensions[CONTAINER_KEY]
    try:
        g.viewer = container.auth_service.session_user(session["user_id"])
    except AuthenticationError:
        session.clear()
        return False
    return True


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or not _load_viewer():
            return jsonify({"message": "Not authenticated"}), 401
        return view(*args, **kwargs)

    return wrapper


def role_required(*allowed_roles: Role):
    """Restrict a view to the given roles: 401 without session, 403 otherwise.

    Usage: @role_required(Role.ADMIN, Role.HEAD)
    """

    allowed = {Role(r) for r in allowed_roles}

    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if current_viewer().role not in allowed:
                return jsonify({"message": "Forbidden"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
