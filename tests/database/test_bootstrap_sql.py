from __future__ import annotations

from datetime import date
from pathlib import Path

from staff_attendance.common.serialization import to_dict
from staff_attendance.core.enums import LeaveStatus
from staff_attendance.database.bootstrap import split_sql_statements
from staff_attendance.leaves.model import LeaveRequest
from staff_attendance.schedules.model import build_class_label

SQL_DIR = Path(__file__).resolve().parents[2] / "database"


def test_split_ignores_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); UPDATE t SET x=\"c;d\";\nSELECT 1"
    assert list(split_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'UPDATE t SET x="c;d"',
        "SELECT 1",
    ]


def test_schema_declares_one_attendance_row_per_user_and_day():
    schema = (SQL_DIR / "schema.sql").read_text(encoding="utf-8")
    assert "UNIQUE KEY uniq_attendance_user_date (user_id, date)" in schema
    statements = list(split_sql_statements(schema))
    assert sum(1 for s in statements if "CREATE TABLE" in s) == 8


def test_class_label_format():
    assert build_class_label("BSE", 2, 1, "M1") == "BSE Y2S1 M1"
    assert build_class_label(None, 2, 1, "M1") is None


def test_to_dict_camel_cases_and_renders_values():
    leave = LeaveRequest(
        id=1, user_id=5, leave_type="sick", start_date=date(2025, 3, 13), end_date=date(2025, 3, 14),
        reason="Flu", status=LeaveStatus.PENDING,
    )
    out = to_dict(leave, exclude=("reason",))
    assert out["startDate"] == "2025-03-13"
    assert out["status"] == "pending"
    assert out["leaveType"] == "sick"
    assert "reason" not in out


def test_leave_responder_reference_is_restricted():
    schema = (SQL_DIR / "schema.sql").read_text(encoding="utf-8")
    assert "FOREIGN KEY (responded_by) REFERENCES users(id) ON DELETE RESTRICT" in schema
