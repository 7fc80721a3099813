from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Iterable, List, Optional

from ...core.enums import Role
from ...reports.filtering import RowT, scope_rows
from ...users.model import SessionUser, User


class DashboardStrategy(ABC):
    """Strategy Pattern: what one role may see and do.

    Department scoping is shared; ``subject_role`` narrows attendance and
    leave rows further to the people a role looks after.
    """

    role: ClassVar[Role]
    subject_role: ClassVar[Optional[Role]] = None
    lists_users: ClassVar[bool] = True
    marks_attendance: ClassVar[bool] = False
    reviews_leave: ClassVar[bool] = False
    include_role_breakdown: ClassVar[bool] = False

    def scope_users(self, viewer: SessionUser, users: Iterable[User]) -> List[User]:
        if viewer.department_id is None:
            return []
        return [u for u in users if u.department_id == viewer.department_id]

    def _narrow(self, rows: List[RowT]) -> List[RowT]:
        if self.subject_role is None:
            return rows
        return [r for r in rows if r.user_role == self.subject_role]

    def scope_attendance(self, viewer: SessionUser, rows: Iterable[RowT]) -> List[RowT]:
        return self._narrow(scope_rows(viewer, rows))

    def scope_leaves(self, viewer: SessionUser, rows: Iterable[RowT]) -> List[RowT]:
        return self._narrow(scope_rows(viewer, rows))

    @abstractmethod
    def can_mark(self, viewer: SessionUser, target: User) -> bool:
        raise NotImplementedError

    @abstractmethod
    def can_respond(self, viewer: SessionUser, requester: Optional[User]) -> bool:
        raise NotImplementedError
