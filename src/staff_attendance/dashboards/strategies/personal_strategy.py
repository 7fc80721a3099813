from __future__ import annotations

from typing import Iterable, List, Optional

from ...core.enums import Role
from ...reports.filtering import RowT
from ...users.model import SessionUser, User
from .base import DashboardStrategy


class PersonalStrategy(DashboardStrategy):
    """Teachers and staff: only their own records."""

    role = Role.TEACHER
    lists_users = False

    def scope_users(self, viewer: SessionUser, users: Iterable[User]) -> List[User]:
        return [u for u in users if u.id == viewer.user_id]

    def scope_attendance(self, viewer: SessionUser, rows: Iterable[RowT]) -> List[RowT]:
        return [r for r in rows if r.user_id == viewer.user_id]

    def scope_leaves(self, viewer: SessionUser, rows: Iterable[RowT]) -> List[RowT]:
        return [r for r in rows if r.user_id == viewer.user_id]

    def can_mark(self, viewer: SessionUser, target: User) -> bool:
        return False

    def can_respond(self, viewer: SessionUser, requester: Optional[User]) -> bool:
        return False
