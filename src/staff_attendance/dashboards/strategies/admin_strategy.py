from __future__ import annotations

from typing import Iterable, List, Optional

from ...core.enums import Role
from ...users.model import SessionUser, User
from .base import DashboardStrategy


class AdminStrategy(DashboardStrategy):
    """Whole university, responds to any leave request."""

    role = Role.ADMIN
    reviews_leave = True
    include_role_breakdown = True

    def scope_users(self, viewer: SessionUser, users: Iterable[User]) -> List[User]:
        return list(users)

    def can_mark(self, viewer: SessionUser, target: User) -> bool:
        return False

    def can_respond(self, viewer: SessionUser, requester: Optional[User]) -> bool:
        return True
