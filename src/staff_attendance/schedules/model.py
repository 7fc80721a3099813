from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


def build_class_label(major_short: Optional[str], year, semester, group: Optional[str]) -> Optional[str]:
    """Display label of a class, e.g. ``"BSE Y2S1 M1"``."""
    if not major_short or year is None or semester is None:
        return None
    return f"{major_short} Y{year}S{semester} {group or ''}".strip()


@dataclass(frozen=True)
class Schedule:
    """A weekly teaching slot of a teacher for one class and subject."""

    id: int
    class_id: int
    subject_id: int
    teacher_id: int
    day: str
    start_time: time
    end_time: time
    room: str
    class_label: Optional[str] = None
    subject_name: Optional[str] = None
