from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceRow


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert_mark(
        self,
        *,
        user_id: int,
        day: date,
        status: AttendanceStatus,
        is_late: bool,
        marked_at: datetime,
        marked_by: Optional[int],
        schedule_id: Optional[int] = None,
    ) -> AttendanceRecord:
        """Insert or overwrite the single record of (user_id, day)."""
        raise NotImplementedError

    def list_rows(self, *, user_id: Optional[int] = None) -> Sequence[AttendanceRow]:
        """Joined rows, newest date first. ``user_id`` limits to one person."""
        raise NotImplementedError

    def list_by_date(self, day: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
