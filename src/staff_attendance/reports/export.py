from __future__ import annotations

import csv
import io
import re
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence

from ..common.datetime_utils import coerce_date, format_time
from ..core.constants import ALL, NOT_AVAILABLE
from ..core.enums import Role
from .filtering import FilterSelection

ATTENDANCE_HEADERS = ["Date", "Name", "Role", "Class", "Status", "Time"]
LEAVE_HEADERS = ["Date", "Name", "Role", "Department", "Status", "Time"]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.-]+")


def _text(value: Any) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)


def _day(value: Any) -> str:
    day = coerce_date(value)
    return day.isoformat() if day else NOT_AVAILABLE


def _role(role: Optional[Role]) -> str:
    return role.value.replace("_", " ") if role else NOT_AVAILABLE


def _status(value: str) -> str:
    return value.replace("_", " ").title() if value else NOT_AVAILABLE


def to_csv(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return out.getvalue()


def attendance_csv(rows: Iterable) -> str:
    """Attendance rows -> CSV text, one line per row plus the header."""

    lines: List[List[str]] = [
        [
            _day(r.date),
            _text(r.user_name),
            _role(r.user_role),
            _text(r.group_name),
            _status(r.status_value),
            _text(format_time(r.marked_at)),
        ]
        for r in rows
    ]
    return to_csv(ATTENDANCE_HEADERS, lines)


def leave_requests_csv(rows: Iterable) -> str:
    lines: List[List[str]] = [
        [
            _day(r.start_date),
            _text(r.user_name),
            _role(r.user_role),
            _text(r.department_name),
            _status(r.status_value),
            _text(format_time(r.responded_at or r.submitted_at)),
        ]
        for r in rows
    ]
    return to_csv(LEAVE_HEADERS, lines)


def export_filename(prefix: str, selection: FilterSelection, day: date) -> str:
    """``attendance_week_BSE-Y2S1-M1_2025-03-12.csv``; the class part is left out when unfiltered."""

    parts = [prefix, selection.date_mode.value]
    if selection.group != ALL:
        parts.append(selection.group)
    parts.append(day.isoformat())
    return "_".join(_UNSAFE_FILENAME_CHARS.sub("-", p).strip("-") for p in parts) + ".csv"
