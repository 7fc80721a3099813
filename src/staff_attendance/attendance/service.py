from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, List, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_iso_date, require_positive_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..dashboards.factory import DashboardStrategyFactory
from ..leaves.repository import LeaveRepository
from ..reports.filtering import FilterSelection, apply_filters, distinct_group_names
from ..schedules.repository import ScheduleRepository
from ..users.model import SessionUser, User
from ..users.repository import UserRepository
from .model import AttendanceRecord, AttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

MARKABLE_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT)


@dataclass(frozen=True)
class DailyStatus:
    """One person's standing for a day.

    ``record`` is None when nothing is stored. ``on_leave`` is set when an
    approved leave request covers the day but no record exists yet.
    """

    user: User
    day: date
    record: Optional[AttendanceRecord] = None
    on_leave: bool = False

    @property
    def status(self) -> AttendanceStatus:
        if self.record:
            return self.record.status
        if self.on_leave:
            return AttendanceStatus.LEAVE
        return AttendanceStatus.PENDING


def is_late_for(schedule: Optional[str], at: datetime) -> bool:
    """True when ``at`` (to the minute) is after the start of ``"HH:MM-HH:MM"``."""

    if not schedule or "-" not in schedule:
        return False
    start_text = schedule.split("-", 1)[0].strip()
    try:
        start = datetime.strptime(start_text, "%H:%M").time()
    except ValueError:
        logger.debug("unreadable working hours %r", schedule)
        return False
    return at.time().replace(second=0, microsecond=0) > start


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        leaves: LeaveRepository,
        schedules: ScheduleRepository,
        *,
        strategy_factory: DashboardStrategyFactory,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._users = users
        self._leaves = leaves
        self._schedules = schedules
        self._strategies = strategy_factory
        self._clock = clock

    def mark(self, marker: SessionUser, data: Mapping[str, Any]) -> AttendanceRecord:
        user_id = require_positive_int(data.get("userId"), "userId")
        day = require_iso_date(data.get("date"), "date")
        raw_status = data.get("status")
        if raw_status not in [s.value for s in MARKABLE_STATUSES]:
            raise ValidationError("status must be 'present' or 'absent'")
        status = AttendanceStatus(raw_status)
        schedule_id = data.get("scheduleId")
        if schedule_id is not None:
            schedule_id = require_positive_int(schedule_id, "scheduleId")

        strategy = self._strategies.for_role(marker.role)
        if not strategy.marks_attendance:
            raise AuthorizationError("Only Class Moderators or HR can mark attendance")

        target = self._users.get_by_id(user_id)
        if not target:
            raise NotFoundError("User not found")

        if not strategy.can_mark(marker, target):
            raise AuthorizationError(
                f"You can only mark attendance of {strategy.subject_role.value} members of your department"
            )

        if schedule_id is not None and not self._schedules.get_by_id(schedule_id):
            raise NotFoundError("Schedule not found")

        now = self._clock()
        is_late = status == AttendanceStatus.PRESENT and is_late_for(target.schedule, now)
        record = self._attendance.upsert_mark(
            user_id=target.id,
            day=day,
            status=status,
            is_late=is_late,
            marked_at=now,
            marked_by=marker.user_id,
            schedule_id=schedule_id,
        )
        logger.info("attendance %s for user %s on %s marked by %s", status.value, target.id, day, marker.unique_id)
        return record

    def _scoped(self, viewer: SessionUser) -> List[AttendanceRow]:
        strategy = self._strategies.for_role(viewer.role)
        return strategy.scope_attendance(viewer, self._attendance.list_rows())

    def list_view(
        self,
        viewer: SessionUser,
        selection: FilterSelection,
        *,
        now: Optional[datetime] = None,
    ) -> List[AttendanceRow]:
        return apply_filters(self._scoped(viewer), selection, now or self._clock())

    def today(self) -> date:
        return self._clock().date()

    def filter_options(self, viewer: SessionUser) -> List[str]:
        return distinct_group_names(self._scoped(viewer))

    def my_attendance(self, viewer: SessionUser) -> List[AttendanceRow]:
        return list(self._attendance.list_rows(user_id=viewer.user_id))

    def today_view(self, viewer: SessionUser, day: Optional[date] = None) -> List[DailyStatus]:
        """Everyone the viewer looks after, with their status on ``day``."""

        day = day or self._clock().date()
        strategy = self._strategies.for_role(viewer.role)
        users = strategy.scope_users(viewer, self._users.list_all())
        if strategy.subject_role is not None:
            users = [u for u in users if u.role == strategy.subject_role]

        by_user = {r.user_id: r for r in self._attendance.list_by_date(day)}
        on_leave = {lr.user_id for lr in self._leaves.list_approved_covering(day) if lr.covers(day)}

        return [
            DailyStatus(user=u, day=day, record=by_user.get(u.id), on_leave=u.id in on_leave)
            for u in users
        ]
