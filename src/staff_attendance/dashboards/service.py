from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, LeaveStatus, Role, UserStatus
from ..leaves.repository import LeaveRepository
from ..users.model import SessionUser
from ..users.repository import UserRepository
from .factory import DashboardStrategyFactory


def _attendance_counts(rows: Iterable) -> Dict[str, int]:
    rows = list(rows)
    return {
        "total": len(rows),
        "present": sum(1 for r in rows if r.status == AttendanceStatus.PRESENT),
        "absent": sum(1 for r in rows if r.status == AttendanceStatus.ABSENT),
        "leave": sum(1 for r in rows if r.status == AttendanceStatus.LEAVE),
    }


def attendance_rate(present: int, total: int) -> float:
    """Present share in percent, one decimal; 0.0 for no records."""
    if total <= 0:
        return 0.0
    return round(present / total * 100, 1)


class MetricsService:
    """Aggregate counts for the dashboard cards, in the caller's scope."""

    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        *,
        strategy_factory: DashboardStrategyFactory,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._attendance = attendance
        self._leaves = leaves
        self._strategies = strategy_factory
        self._clock = clock

    def metrics(self, viewer: SessionUser, *, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or self._clock().date()
        strategy = self._strategies.for_role(viewer.role)

        users = strategy.scope_users(viewer, self._users.list_all())
        attendance = strategy.scope_attendance(viewer, self._attendance.list_rows())
        leaves = strategy.scope_leaves(viewer, self._leaves.list_rows())

        by_role = None
        if strategy.include_role_breakdown:
            by_role = {role.value: sum(1 for u in users if u.role == role) for role in Role}

        overall = _attendance_counts(attendance)
        overall["rate"] = attendance_rate(overall["present"], overall["total"])

        dated = [(r.filter_date, r) for r in attendance]
        return {
            "users": {
                "total": len(users),
                "active": sum(1 for u in users if u.status == UserStatus.ACTIVE),
                "inactive": sum(1 for u in users if u.status == UserStatus.INACTIVE),
                "byRole": by_role,
            },
            "attendance": overall,
            "leaves": {
                "total": len(leaves),
                "pending": sum(1 for r in leaves if r.status == LeaveStatus.PENDING),
                "approved": sum(1 for r in leaves if r.status == LeaveStatus.APPROVED),
                "rejected": sum(1 for r in leaves if r.status == LeaveStatus.REJECTED),
            },
            "today": _attendance_counts(r for d, r in dated if d == today),
            "thisMonth": _attendance_counts(
                r for d, r in dated if d is not None and (d.year, d.month) == (today.year, today.month)
            ),
        }
