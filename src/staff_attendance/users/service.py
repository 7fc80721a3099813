from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role, UserStatus
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..dashboards.factory import DashboardStrategyFactory
from .model import Department, SessionUser, User
from .repository import DepartmentRepository, UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login) and resolve the session user."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, unique_id: str, password: str) -> SessionUser:
        if not isinstance(unique_id, str) or not unique_id.strip() or not isinstance(password, str) or not password:
            raise ValidationError("Unique ID and password are required")

        user = self._users.get_by_unique_id(unique_id.strip())
        if not user or not user.is_active:
            logger.info("login refused for %s", unique_id)
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder or corrupted hash
            ok = False

        if not ok:
            logger.info("login refused for %s", unique_id)
            raise AuthenticationError("Invalid credentials")

        return SessionUser.from_user(user)

    def current_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise AuthenticationError("Not authenticated")
        return user

    def session_user(self, user_id: int) -> SessionUser:
        return SessionUser.from_user(self.current_user(user_id))


class UserService:
    """Use case: list users for a viewer and manage accounts (admin)."""

    def __init__(
        self,
        users: UserRepository,
        departments: DepartmentRepository,
        *,
        strategy_factory: DashboardStrategyFactory,
    ):
        self._users = users
        self._departments = departments
        self._strategies = strategy_factory

    def list_visible(self, viewer: SessionUser) -> List[User]:
        strategy = self._strategies.for_role(viewer.role)
        if not strategy.lists_users:
            raise AuthorizationError("Forbidden")
        return strategy.scope_users(viewer, self._users.list_all())

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    @staticmethod
    def _require_admin(actor: SessionUser) -> None:
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Forbidden")

    def get_user(self, actor: SessionUser, user_id: int) -> User:
        self._require_admin(actor)
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(self, actor: SessionUser, data: Mapping[str, Any]) -> User:
        self._require_admin(actor)

        unique_id = require_non_empty(data.get("uniqueId"), "uniqueId")
        name = require_non_empty(data.get("name"), "name")
        password = require_min_length(data.get("password"), "password", MIN_PASSWORD_LENGTH)
        try:
            role = Role(data.get("role"))
        except ValueError:
            raise ValidationError("role is invalid")

        if self._users.get_by_unique_id(unique_id):
            raise ValidationError("Unique ID already exists")

        fields = _optional_fields(data)
        status = fields.pop("status", UserStatus.ACTIVE)
        user = User(
            id=0,
            unique_id=unique_id,
            name=name,
            password_hash=generate_password_hash(password),
            role=role,
            status=status,
            **fields,
        )
        new_id = self._users.create(user)
        logger.info("user %s created by %s", unique_id, actor.unique_id)
        return self.get_user(actor, new_id)

    def update_user(self, actor: SessionUser, user_id: int, data: Mapping[str, Any]) -> User:
        current = self.get_user(actor, user_id)

        if "role" in data and data["role"] != current.role.value:
            raise ValidationError("role cannot be changed")
        if "uniqueId" in data and data["uniqueId"] != current.unique_id:
            raise ValidationError("uniqueId cannot be changed")

        changes: Dict[str, Any] = _optional_fields(data)
        if "name" in data:
            changes["name"] = require_non_empty(data["name"], "name")
        if changes:
            self._users.update(current.id, changes)
        if data.get("password"):
            self._set_password(current.id, data["password"])
        return self.get_user(actor, current.id)

    def delete_user(self, actor: SessionUser, user_id: int) -> None:
        self._require_admin(actor)
        if int(user_id) == actor.user_id:
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete(int(user_id)):
            raise NotFoundError("User not found")
        logger.info("user %s deleted by %s", user_id, actor.unique_id)

    def reset_password(self, actor: SessionUser, user_id: int, new_password: Any) -> None:
        self._require_admin(actor)
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")
        self._set_password(int(user_id), new_password)

    def _set_password(self, user_id: int, password: Any) -> None:
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        self._users.set_password(user_id, generate_password_hash(password))


_OPTIONAL_KEYS = {
    "email": "email",
    "departmentId": "department_id",
    "classId": "class_id",
    "workType": "work_type",
    "schedule": "schedule",
}


def _optional_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, column in _OPTIONAL_KEYS.items():
        if key not in data:
            continue
        value = data[key]
        if column in ("department_id", "class_id") and value is not None:
            if isinstance(value, bool) or not str(value).isdigit():
                raise ValidationError(f"{key} must be a positive integer")
            value = int(value)
        out[column] = value or None
    if "status" in data:
        try:
            out["status"] = UserStatus(data["status"])
        except ValueError:
            raise ValidationError("status is invalid")
    return out
