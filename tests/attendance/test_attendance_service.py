from __future__ import annotations

from datetime import date, datetime, time

import pytest

from staff_attendance.attendance.service import is_late_for
from staff_attendance.core.enums import AttendanceStatus, LeaveStatus
from staff_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from staff_attendance.reports.filtering import FilterSelection
from staff_attendance.schedules.model import Schedule


def test_marking_twice_keeps_one_record_with_second_status(container, attendance_repo, as_user):
    moderator = as_user("M003")
    svc = container.attendance_service

    first = svc.mark(moderator, {"userId": 5, "date": "2025-03-12", "status": "present"})
    second = svc.mark(moderator, {"userId": 5, "date": "2025-03-12", "status": "absent"})

    assert first.id == second.id
    records = [r for r in attendance_repo.records.values() if r.user_id == 5]
    assert len(records) == 1
    assert records[0].status == AttendanceStatus.ABSENT
    assert records[0].marked_by == moderator.user_id


def test_mark_sets_late_after_schedule_start(container, as_user, fixed_now):
    # fixed_now is 09:30, teacher works 08:00-17:00
    rec = container.attendance_service.mark(as_user("M003"), {"userId": 5, "date": "2025-03-12", "status": "present"})
    assert rec.is_late is True
    assert rec.marked_at == fixed_now

    # no working hours -> never late
    rec = container.attendance_service.mark(as_user("M003"), {"userId": 6, "date": "2025-03-12", "status": "present"})
    assert rec.is_late is False


def test_absent_is_never_late(container, as_user):
    rec = container.attendance_service.mark(as_user("M003"), {"userId": 5, "date": "2025-03-12", "status": "absent"})
    assert rec.is_late is False


def test_is_late_for_compares_to_the_minute():
    assert not is_late_for("08:00-17:00", datetime(2025, 1, 1, 8, 0, 59))
    assert is_late_for("08:00-17:00", datetime(2025, 1, 1, 8, 1))
    assert not is_late_for("flexible", datetime(2025, 1, 1, 23, 0))
    assert not is_late_for(None, datetime(2025, 1, 1, 23, 0))


def test_hr_marks_staff_but_not_teachers(container, as_user):
    hr = as_user("HR003")
    rec = container.attendance_service.mark(hr, {"userId": 7, "date": "2025-03-12", "status": "present"})
    assert rec.status == AttendanceStatus.PRESENT

    with pytest.raises(AuthorizationError):
        container.attendance_service.mark(hr, {"userId": 5, "date": "2025-03-12", "status": "present"})


@pytest.mark.parametrize("unique_id", ["A001", "H003", "T301", "S301"])
def test_other_roles_cannot_mark(container, as_user, unique_id):
    with pytest.raises(AuthorizationError):
        container.attendance_service.mark(as_user(unique_id), {"userId": 5, "date": "2025-03-12", "status": "present"})


def test_moderator_cannot_mark_other_department(container, as_user):
    with pytest.raises(AuthorizationError):
        container.attendance_service.mark(as_user("M003"), {"userId": 8, "date": "2025-03-12", "status": "present"})


def test_unknown_user_is_not_found(container, as_user):
    with pytest.raises(NotFoundError):
        container.attendance_service.mark(as_user("M003"), {"userId": 999, "date": "2025-03-12", "status": "present"})


@pytest.mark.parametrize(
    "payload",
    [
        {"date": "2025-03-12", "status": "present"},
        {"userId": "5", "date": "2025-03-12", "status": "present"},
        {"userId": 5, "date": "12/03/2025", "status": "present"},
        {"userId": 5, "date": "2025-3-12", "status": "present"},
        {"userId": 5, "date": "2025-03-12", "status": "leave"},
        {"userId": 5, "date": "2025-03-12", "status": "present", "scheduleId": 0},
    ],
)
def test_malformed_mark_payload(container, as_user, payload):
    with pytest.raises(ValidationError):
        container.attendance_service.mark(as_user("M003"), payload)


def test_unknown_schedule_is_not_found(container, schedules_repo, as_user):
    payload = {"userId": 5, "date": "2025-03-12", "status": "present", "scheduleId": 4}
    with pytest.raises(NotFoundError):
        container.attendance_service.mark(as_user("M003"), payload)

    schedules_repo.by_id[4] = Schedule(
        id=4, class_id=31, subject_id=1, teacher_id=5, day="Wednesday",
        start_time=time(8, 0), end_time=time(10, 0), room="A101",
    )
    rec = container.attendance_service.mark(as_user("M003"), payload)
    assert rec.schedule_id == 4


def test_today_view_synthesizes_leave_and_pending(container, leaves_repo, seed_mark, as_user, fixed_now):
    today = fixed_now.date()
    seed_mark(5, today, AttendanceStatus.PRESENT)
    rid = leaves_repo.create(
        user_id=6, leave_type="sick", start_date=date(2025, 3, 11), end_date=date(2025, 3, 13),
        reason="flu", submitted_at=fixed_now,
    )
    leaves_repo.respond(request_id=rid, status=LeaveStatus.APPROVED, responded_at=fixed_now, responded_by=2)

    items = {i.user.id: i for i in container.attendance_service.today_view(as_user("M003"))}

    # moderator looks after the department's teachers only
    assert set(items) == {5, 6}
    assert items[5].status == AttendanceStatus.PRESENT
    assert items[6].status == AttendanceStatus.LEAVE
    assert items[6].record is None and items[6].on_leave


def test_today_view_other_day_is_pending(container, seed_mark, as_user, fixed_now):
    seed_mark(5, fixed_now.date(), AttendanceStatus.PRESENT)
    items = container.attendance_service.today_view(as_user("A001"), date(2025, 3, 13))
    assert {i.status for i in items} == {AttendanceStatus.PENDING}


def test_list_view_and_filter_options_are_scoped(container, seed_mark, as_user, fixed_now):
    today = fixed_now.date()
    for uid in (5, 6, 7, 8):
        seed_mark(uid, today, AttendanceStatus.PRESENT)

    head = as_user("H003")
    rows = container.attendance_service.list_view(head, FilterSelection())
    assert sorted(r.user_id for r in rows) == [5, 6, 7]
    assert container.attendance_service.filter_options(head) == ["BSE Y2S1 M1", "BSE Y3S2 M2", "ITE"]

    mine = container.attendance_service.my_attendance(as_user("T701"))
    assert [r.user_id for r in mine] == [8]
