from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from ..schedules.model import build_class_label
from .model import AttendanceRecord, AttendanceRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = "id, user_id, date, status, is_late, marked_at, marked_by, schedule_id, notes"

# The class of a record is the scheduled class when marked against a slot,
# otherwise the subject user's own class.
_ROWS_SELECT = """
    SELECT a.id, a.user_id, a.date, a.status, a.is_late, a.marked_at, a.marked_by,
           a.schedule_id, a.notes,
           u.name AS user_name, u.unique_id AS user_unique_id, u.role AS user_role,
           u.department_id, d.name AS department_name,
           sm.short_name AS s_major, sc.year AS s_year, sc.semester AS s_semester, sc.`group` AS s_group,
           um.short_name AS u_major, uc.year AS u_year, uc.semester AS u_semester, uc.`group` AS u_group,
           sub.name AS subject_name,
           mk.name AS marked_by_name
    FROM attendance a
    LEFT JOIN users u ON u.id = a.user_id
    LEFT JOIN departments d ON d.id = u.department_id
    LEFT JOIN schedules s ON s.id = a.schedule_id
    LEFT JOIN subjects sub ON sub.id = s.subject_id
    LEFT JOIN classes sc ON sc.id = s.class_id
    LEFT JOIN majors sm ON sm.id = sc.major_id
    LEFT JOIN classes uc ON uc.id = u.class_id
    LEFT JOIN majors um ON um.id = uc.major_id
    LEFT JOIN users mk ON mk.id = a.marked_by
"""


def _row_to_record(row: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        date=row["date"],
        status=AttendanceStatus(row["status"]),
        is_late=bool(row.get("is_late")),
        marked_at=row.get("marked_at"),
        marked_by=row.get("marked_by"),
        schedule_id=row.get("schedule_id"),
        notes=row.get("notes"),
    )


def _row_to_view(row: Dict[str, Any]) -> AttendanceRow:
    label = build_class_label(row.get("s_major"), row.get("s_year"), row.get("s_semester"), row.get("s_group"))
    if not label:
        label = build_class_label(row.get("u_major"), row.get("u_year"), row.get("u_semester"), row.get("u_group"))
    return AttendanceRow(
        id=int(row["id"]),
        # orphaned rows (user gone) have no subject
        user_id=row.get("user_id") if row.get("user_name") is not None else None,
        date=row["date"],
        status=AttendanceStatus(row["status"]),
        is_late=bool(row.get("is_late")),
        marked_at=row.get("marked_at"),
        marked_by=row.get("marked_by"),
        schedule_id=row.get("schedule_id"),
        notes=row.get("notes"),
        user_name=row.get("user_name"),
        user_unique_id=row.get("user_unique_id"),
        user_role=Role(row["user_role"]) if row.get("user_role") else None,
        department_id=row.get("department_id"),
        department_name=row.get("department_name"),
        class_label=label,
        subject_name=row.get("subject_name"),
        marked_by_name=row.get("marked_by_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE user_id=%s AND date=%s",
                (int(user_id), day),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, date, status, is_late, marked_at, marked_by, schedule_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status), is_late=VALUES(is_late), marked_at=VALUES(marked_at),
                    marked_by=VALUES(marked_by), schedule_id=VALUES(schedule_id)
                """,
                (int(user_id), day, status.value, 1 if is_late else 0, marked_at, marked_by, schedule_id),
            )
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE user_id=%s AND date=%s",
                (int(user_id), day),
            )
            return _row_to_record(fetchone(cur))

    def list_rows(self, *, user_id: Optional[int] = None) -> Sequence[AttendanceRow]:
        clauses, params = [], []
        if user_id is not None:
            clauses.append("a.user_id=%s")
            params.append(int(user_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_ROWS_SELECT} {where_clause(clauses)} ORDER BY a.date DESC, a.id DESC", tuple(params))
            return [_row_to_view(r) for r in fetchall(cur)]

    def list_by_date(self, day: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE date=%s ORDER BY id", (day,))
            return [_row_to_record(r) for r in fetchall(cur)]
