from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Schedule, build_class_label
from .repository import ScheduleRepository

_SELECT = """
    SELECT s.id, s.class_id, s.subject_id, s.teacher_id, s.day, s.start_time, s.end_time, s.room,
           sub.name AS subject_name,
           m.short_name AS major_short, c.year, c.semester, c.`group`
    FROM schedules s
    LEFT JOIN subjects sub ON sub.id = s.subject_id
    LEFT JOIN classes c ON c.id = s.class_id
    LEFT JOIN majors m ON m.id = c.major_id
"""

# MySQL has no natural weekday order for VARCHAR days
_DAY_ORDER = "FIELD(s.day, 'Monday','Tuesday','Wednesday','Thursday','Friday','Saturday','Sunday')"


def _row_to_schedule(row: Dict[str, Any]) -> Schedule:
    return Schedule(
        id=int(row["id"]),
        class_id=int(row["class_id"]),
        subject_id=int(row["subject_id"]),
        teacher_id=int(row["teacher_id"]),
        day=row["day"],
        start_time=normalize_mysql_time(row["start_time"]),
        end_time=normalize_mysql_time(row["end_time"]),
        room=row["room"],
        class_label=build_class_label(row.get("major_short"), row.get("year"), row.get("semester"), row.get("group")),
        subject_name=row.get("subject_name"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.id=%s", (int(schedule_id),))
            row = fetchone(cur)
            return _row_to_schedule(row) if row else None

    def list_for_teacher(self, teacher_id: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE s.teacher_id=%s ORDER BY {_DAY_ORDER}, s.start_time",
                (int(teacher_id),),
            )
            return [_row_to_schedule(r) for r in fetchall(cur)]
