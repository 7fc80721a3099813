from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles driving permissions and dashboard scope."""

    HEAD = "head"
    ADMIN = "admin"
    MODERATOR = "moderator"
    HR_ASSISTANT = "hr_assistant"
    TEACHER = "teacher"
    STAFF = "staff"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Attendance status as stored, plus PENDING for "not marked yet"."""

    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"
    PENDING = "pending"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DateMode(str, Enum):
    """Relative date windows offered by the dashboard filters."""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
