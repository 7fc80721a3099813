from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, List, Mapping, Optional

from ..common.datetime_utils import coerce_date, iter_days, now_local
from ..common.validators import require_iso_date, require_non_empty, require_positive_int
from ..core.constants import MAX_LEAVE_DAYS
from ..core.enums import LeaveStatus
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..dashboards.factory import DashboardStrategyFactory
from ..reports.filtering import FilterSelection, apply_filters, distinct_group_names
from ..users.model import SessionUser
from ..users.repository import UserRepository
from .model import LeaveRequest, LeaveRow
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave requests: submit, respond (pending -> approved/rejected), list."""

    def __init__(
        self,
        leaves: LeaveRepository,
        users: UserRepository,
        *,
        strategy_factory: DashboardStrategyFactory,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._users = users
        self._strategies = strategy_factory
        self._clock = clock

    def submit(self, requester: SessionUser, data: Mapping[str, Any]) -> LeaveRequest:
        leave_type = require_non_empty(data.get("leaveType"), "leaveType")
        start = require_iso_date(data.get("startDate"), "startDate")
        end = require_iso_date(data.get("endDate"), "endDate")
        reason = require_non_empty(data.get("reason"), "reason")
        if start > end:
            raise ValidationError("startDate must not be after endDate")
        if (end - start).days + 1 > MAX_LEAVE_DAYS:
            raise ValidationError(f"A leave request may cover at most {MAX_LEAVE_DAYS} days")

        request_id = self._leaves.create(
            user_id=requester.user_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            reason=reason,
            submitted_at=self._clock(),
        )
        logger.info("leave request %s submitted by %s (%s..%s)", request_id, requester.unique_id, start, end)
        return self._leaves.get_by_id(request_id)

    def respond(self, responder: SessionUser, data: Mapping[str, Any]) -> LeaveRequest:
        request_id = require_positive_int(data.get("requestId"), "requestId")
        raw_status = data.get("status")
        if raw_status not in (LeaveStatus.APPROVED.value, LeaveStatus.REJECTED.value):
            raise ValidationError("status must be 'approved' or 'rejected'")
        status = LeaveStatus(raw_status)
        rejection_reason = _optional_text(data.get("rejectionReason")) if status == LeaveStatus.REJECTED else None

        strategy = self._strategies.for_role(responder.role)
        if not strategy.reviews_leave:
            raise AuthorizationError("Only Head of Department can approve/reject leave requests")

        leave = self._leaves.get_by_id(request_id)
        if not leave:
            raise NotFoundError("Leave request not found")

        requester = self._users.get_by_id(leave.user_id)
        if not strategy.can_respond(responder, requester):
            raise AuthorizationError("You can only respond to leave requests from your department")

        if not leave.is_pending:
            raise InvalidTransitionError(f"Leave request is already {leave.status.value}")

        now = self._clock()
        if status == LeaveStatus.APPROVED:
            updated = self._leaves.approve(
                request_id=leave.id,
                user_id=leave.user_id,
                days=_leave_days(leave),
                responded_at=now,
                responded_by=responder.user_id,
            )
        else:
            updated = self._leaves.respond(
                request_id=leave.id,
                status=status,
                responded_at=now,
                responded_by=responder.user_id,
                rejection_reason=rejection_reason,
            )
        if not updated:
            # lost a race with another responder
            raise InvalidTransitionError("Leave request is no longer pending")

        logger.info("leave request %s %s by %s", leave.id, status.value, responder.unique_id)
        return self._leaves.get_by_id(leave.id)

    def _scoped(self, viewer: SessionUser) -> List[LeaveRow]:
        strategy = self._strategies.for_role(viewer.role)
        return strategy.scope_leaves(viewer, self._leaves.list_rows())

    def list_view(
        self,
        viewer: SessionUser,
        selection: FilterSelection,
        *,
        now: Optional[datetime] = None,
    ) -> List[LeaveRow]:
        return apply_filters(self._scoped(viewer), selection, now or self._clock())

    def today(self) -> date:
        return self._clock().date()

    def filter_options(self, viewer: SessionUser) -> List[str]:
        return distinct_group_names(self._scoped(viewer))


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("rejectionReason must be text")
    return value.strip() or None


def _leave_days(leave: LeaveRequest) -> List[date]:
    start, end = coerce_date(leave.start_date), coerce_date(leave.end_date)
    if start is None or end is None:
        logger.warning("leave request %s has unreadable dates, no attendance written", leave.id)
        return []
    return list(iter_days(start, end))
