"""Scoping and filtering of attendance / leave rows for a viewer.

Every list view goes through the same two steps:

1. ``scope_rows``: department boundary (admin sees everything, everyone else
   only rows whose subject user belongs to their department).
2. ``apply_filters``: date window + categorical filters chosen in the UI.

Both are pure functions and keep the input order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, TypeVar

from ..common.datetime_utils import start_of_day
from ..core.constants import ALL, ALL_RANGE_END, ALL_RANGE_START
from ..core.enums import DateMode, Role
from ..core.exceptions import ValidationError


class ScopedRow(Protocol):
    """Shape shared by attendance and leave rows."""

    user_id: Optional[int]
    user_role: Optional[Role]
    department_id: Optional[int]

    @property
    def status_value(self) -> str: ...

    @property
    def group_name(self) -> Optional[str]: ...

    @property
    def filter_date(self) -> Optional[date]: ...


class Viewer(Protocol):
    user_id: int
    role: Role
    department_id: Optional[int]


RowT = TypeVar("RowT", bound=ScopedRow)


@dataclass(frozen=True)
class FilterSelection:
    date_mode: DateMode = DateMode.ALL
    group: str = ALL
    status: str = ALL
    role: str = ALL

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "FilterSelection":
        raw_mode = (args.get("date_mode") or args.get("dateMode") or ALL).strip().lower()
        try:
            mode = DateMode(raw_mode)
        except ValueError:
            raise ValidationError(f"Unknown date_mode: {raw_mode}")
        return cls(
            date_mode=mode,
            group=_selection(args.get("class") or args.get("department")),
            status=_selection(args.get("status")).lower(),
            role=_selection(args.get("role")).lower(),
        )


def _selection(value: Optional[str]) -> str:
    value = (value or "").strip()
    return value or ALL


def date_range(mode: DateMode, now: datetime) -> Tuple[datetime, datetime]:
    """Inclusive [start, end] window for a date mode, evaluated at ``now``."""

    if mode == DateMode.TODAY:
        return start_of_day(now.date()), now
    if mode == DateMode.WEEK:
        # isoweekday: Monday=1 .. Sunday=7
        monday = now.date() - timedelta(days=now.isoweekday() - 1)
        return start_of_day(monday), now
    if mode == DateMode.MONTH:
        return start_of_day(now.date().replace(day=1)), now
    return ALL_RANGE_START, ALL_RANGE_END


def scope_rows(viewer: Viewer, rows: Iterable[RowT]) -> List[RowT]:
    if viewer.role == Role.ADMIN:
        return list(rows)
    if viewer.department_id is None:
        return []
    return [r for r in rows if r.user_id is not None and r.department_id == viewer.department_id]


def in_window(day: Optional[date], start: datetime, end: datetime) -> bool:
    if day is None:
        return False
    return start <= start_of_day(day) <= end


def apply_filters(rows: Sequence[RowT], selection: FilterSelection, now: datetime) -> List[RowT]:
    start, end = date_range(selection.date_mode, now)
    out: List[RowT] = []
    for row in rows:
        if not in_window(row.filter_date, start, end):
            continue
        if selection.group != ALL and row.group_name != selection.group:
            continue
        if selection.status != ALL and row.status_value != selection.status:
            continue
        if selection.role != ALL and (row.user_role is None or row.user_role.value != selection.role):
            continue
        out.append(row)
    return out


def distinct_group_names(rows: Iterable[ScopedRow]) -> List[str]:
    """Sorted unique class / department names of already-scoped rows."""
    return sorted({r.group_name for r in rows if r.group_name})
