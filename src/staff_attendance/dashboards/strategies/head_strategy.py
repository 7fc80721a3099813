from __future__ import annotations

from typing import Optional

from ...core.enums import Role
from ...users.model import SessionUser, User
from .base import DashboardStrategy


class HeadStrategy(DashboardStrategy):
    """Head of department: own department, approves its leave requests."""

    role = Role.HEAD
    reviews_leave = True
    include_role_breakdown = True

    def can_mark(self, viewer: SessionUser, target: User) -> bool:
        return False

    def can_respond(self, viewer: SessionUser, requester: Optional[User]) -> bool:
        return (
            requester is not None
            and viewer.department_id is not None
            and requester.department_id == viewer.department_id
        )
