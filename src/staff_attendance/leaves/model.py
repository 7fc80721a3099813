from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import coerce_date
from ..core.enums import LeaveStatus, Role

# Labels for the leave types the request form offers. Unknown types are
# stored as typed and displayed unchanged.
LEAVE_TYPE_LABELS = {
    "sick": "Sick Leave",
    "personal": "Personal Leave",
    "annual": "Annual Leave",
    "maternity": "Maternity Leave",
    "emergency": "Emergency Leave",
}


def leave_type_label(leave_type: str) -> str:
    return LEAVE_TYPE_LABELS.get(leave_type, leave_type)


@dataclass(frozen=True)
class LeaveRequest:
    id: int
    user_id: int
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    rejection_reason: Optional[str] = None
    submitted_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[int] = None

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    def covers(self, day: date) -> bool:
        start, end = coerce_date(self.start_date), coerce_date(self.end_date)
        return start is not None and end is not None and start <= day <= end


@dataclass(frozen=True)
class LeaveRow:
    """Leave request joined with the requester (and responder name)."""

    id: int
    user_id: Optional[int]
    leave_type: str
    start_date: object
    end_date: object
    reason: str
    status: LeaveStatus
    rejection_reason: Optional[str] = None
    submitted_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[int] = None
    user_name: Optional[str] = None
    user_unique_id: Optional[str] = None
    user_role: Optional[Role] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    class_label: Optional[str] = None
    responded_by_name: Optional[str] = None

    @property
    def filter_date(self) -> Optional[date]:
        return coerce_date(self.start_date)

    @property
    def group_name(self) -> Optional[str]:
        return self.class_label or self.department_name

    @property
    def status_value(self) -> str:
        return self.status.value

    @property
    def leave_type_label(self) -> str:
        return leave_type_label(self.leave_type)
