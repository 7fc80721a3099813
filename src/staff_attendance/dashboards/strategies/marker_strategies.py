from __future__ import annotations

from typing import Optional

from ...core.enums import Role
from ...users.model import SessionUser, User
from .base import DashboardStrategy


class _MarkerStrategy(DashboardStrategy):
    """Marks attendance for ``subject_role`` people in the own department."""

    marks_attendance = True

    def can_mark(self, viewer: SessionUser, target: User) -> bool:
        return (
            target.role == self.subject_role
            and viewer.department_id is not None
            and target.department_id == viewer.department_id
        )

    def can_respond(self, viewer: SessionUser, requester: Optional[User]) -> bool:
        return False


class ModeratorStrategy(_MarkerStrategy):
    role = Role.MODERATOR
    subject_role = Role.TEACHER


class HRAssistantStrategy(_MarkerStrategy):
    role = Role.HR_ASSISTANT
    subject_role = Role.STAFF
