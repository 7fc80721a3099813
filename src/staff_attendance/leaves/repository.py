from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest, LeaveRow


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
        submitted_at: datetime,
    ) -> int:
        raise NotImplementedError

    def respond(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        responded_at: datetime,
        responded_by: int,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to a terminal status.

        Returns False when the request is no longer pending.
        """
        raise NotImplementedError

    def approve(
        self,
        *,
        request_id: int,
        user_id: int,
        days: Sequence[date],
        responded_at: datetime,
        responded_by: int,
    ) -> bool:
        """Approve a pending request and mark each of ``days`` as leave.

        Both writes commit together or not at all. Returns False when the
        request is no longer pending.
        """
        raise NotImplementedError

    def list_rows(self, *, user_id: Optional[int] = None) -> Sequence[LeaveRow]:
        raise NotImplementedError

    def list_approved_covering(self, day: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError
