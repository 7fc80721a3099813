from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import coerce_date
from ..core.enums import AttendanceStatus, Role


@dataclass(frozen=True)
class AttendanceRecord:
    """One stored attendance row. At most one exists per (user_id, date)."""

    id: int
    user_id: int
    date: date
    status: AttendanceStatus
    is_late: bool = False
    marked_at: Optional[datetime] = None
    marked_by: Optional[int] = None
    schedule_id: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRow:
    """Attendance joined with its subject user, class label and marker name.

    Read model for the list views, filters and CSV export. ``date`` is kept
    as the driver returned it and parsed on access.
    """

    id: int
    user_id: Optional[int]
    date: object
    status: AttendanceStatus
    is_late: bool = False
    marked_at: Optional[datetime] = None
    marked_by: Optional[int] = None
    schedule_id: Optional[int] = None
    notes: Optional[str] = None
    user_name: Optional[str] = None
    user_unique_id: Optional[str] = None
    user_role: Optional[Role] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    class_label: Optional[str] = None
    subject_name: Optional[str] = None
    marked_by_name: Optional[str] = None

    @property
    def filter_date(self) -> Optional[date]:
        return coerce_date(self.date)

    @property
    def group_name(self) -> Optional[str]:
        return self.class_label or self.department_name

    @property
    def status_value(self) -> str:
        return self.status.value
