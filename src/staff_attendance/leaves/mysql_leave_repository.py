from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from ..schedules.model import build_class_label
from .model import LeaveRequest, LeaveRow
from .repository import LeaveRepository

_COLUMNS = (
    "id, user_id, leave_type, start_date, end_date, reason, status, rejection_reason, "
    "submitted_at, responded_at, responded_by"
)

_ROWS_SELECT = """
    SELECT l.id, l.user_id, l.leave_type, l.start_date, l.end_date, l.reason, l.status,
           l.rejection_reason, l.submitted_at, l.responded_at, l.responded_by,
           u.name AS user_name, u.unique_id AS user_unique_id, u.role AS user_role,
           u.department_id, d.name AS department_name,
           m.short_name AS major_short, c.year, c.semester, c.`group`,
           r.name AS responded_by_name
    FROM leave_requests l
    LEFT JOIN users u ON u.id = l.user_id
    LEFT JOIN departments d ON d.id = u.department_id
    LEFT JOIN classes c ON c.id = u.class_id
    LEFT JOIN majors m ON m.id = c.major_id
    LEFT JOIN users r ON r.id = l.responded_by
"""


def _row_to_request(row: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        leave_type=row["leave_type"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        reason=row["reason"],
        status=LeaveStatus(row["status"]),
        rejection_reason=row.get("rejection_reason"),
        submitted_at=row.get("submitted_at"),
        responded_at=row.get("responded_at"),
        responded_by=row.get("responded_by"),
    )


def _row_to_view(row: Dict[str, Any]) -> LeaveRow:
    return LeaveRow(
        id=int(row["id"]),
        user_id=row.get("user_id") if row.get("user_name") is not None else None,
        leave_type=row["leave_type"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        reason=row["reason"],
        status=LeaveStatus(row["status"]),
        rejection_reason=row.get("rejection_reason"),
        submitted_at=row.get("submitted_at"),
        responded_at=row.get("responded_at"),
        responded_by=row.get("responded_by"),
        user_name=row.get("user_name"),
        user_unique_id=row.get("user_unique_id"),
        user_role=Role(row["user_role"]) if row.get("user_role") else None,
        department_id=row.get("department_id"),
        department_name=row.get("department_name"),
        class_label=build_class_label(row.get("major_short"), row.get("year"), row.get("semester"), row.get("group")),
        responded_by_name=row.get("responded_by_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (int(request_id),))
            row = fetchone(cur)
            return _row_to_request(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type, start_date, end_date, reason, status, submitted_at)
                VALUES(%s,%s,%s,%s,%s,'pending',%s)
                """,
                (int(user_id), leave_type, start_date, end_date, reason, submitted_at),
            )
            return int(cur.lastrowid)

    def respond(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        responded_at: datetime,
        responded_by: int,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # status guard: terminal states never change
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, responded_at=%s, responded_by=%s, rejection_reason=%s
                WHERE id=%s AND status='pending'
                """,
                (status.value, responded_at, int(responded_by), rejection_reason, int(request_id)),
            )
            return cur.rowcount > 0

    def approve(
        self,
        *,
        request_id: int,
        user_id: int,
        days: Sequence[date],
        responded_at: datetime,
        responded_by: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status='approved', responded_at=%s, responded_by=%s, rejection_reason=NULL
                WHERE id=%s AND status='pending'
                """,
                (responded_at, int(responded_by), int(request_id)),
            )
            if cur.rowcount == 0:
                return False
            if days:
                cur.executemany(
                    """
                    INSERT INTO attendance(user_id, date, status, is_late, marked_at, marked_by)
                    VALUES(%s,%s,'leave',0,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        status=VALUES(status), is_late=VALUES(is_late), marked_at=VALUES(marked_at),
                        marked_by=VALUES(marked_by)
                    """,
                    [(int(user_id), day, responded_at, int(responded_by)) for day in days],
                )
            return True

    def list_rows(self, *, user_id: Optional[int] = None) -> Sequence[LeaveRow]:
        clauses, params = [], []
        if user_id is not None:
            clauses.append("l.user_id=%s")
            params.append(int(user_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_ROWS_SELECT} {where_clause(clauses)} ORDER BY l.submitted_at DESC, l.id DESC", tuple(params))
            return [_row_to_view(r) for r in fetchall(cur)]

    def list_approved_covering(self, day: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM leave_requests
                WHERE status='approved' AND start_date <= %s AND end_date >= %s
                ORDER BY id
                """,
                (day, day),
            )
            return [_row_to_request(r) for r in fetchall(cur)]
