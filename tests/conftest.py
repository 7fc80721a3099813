from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Dict, List, Optional, Set

import pytest
from werkzeug.security import generate_password_hash

from staff_attendance.attendance.model import AttendanceRecord, AttendanceRow
from staff_attendance.container import wire
from staff_attendance.core.enums import AttendanceStatus, LeaveStatus, Role, UserStatus
from staff_attendance.core.exceptions import ConflictError
from staff_attendance.leaves.model import LeaveRequest, LeaveRow
from staff_attendance.schedules.model import Schedule
from staff_attendance.users.model import Department, SessionUser, User

PASSWORD = "secret123"
# cheap hash so the suite stays fast
PASSWORD_HASH = generate_password_hash(PASSWORD, method="pbkdf2:sha256:1000")

DEPARTMENTS = {3: Department(id=3, name="ITE", short_name="ITE"), 7: Department(id=7, name="DSE", short_name="DSE")}


def make_user(uid: int, unique_id: str, role: Role, dept: Optional[int], **kw) -> User:
    return User(
        id=uid,
        unique_id=unique_id,
        name=kw.pop("name", f"User {unique_id}"),
        password_hash=PASSWORD_HASH,
        role=role,
        department_id=dept,
        **kw,
    )


def default_users() -> List[User]:
    return [
        make_user(1, "A001", Role.ADMIN, None, name="Admin"),
        make_user(2, "H003", Role.HEAD, 3, name="Head Three"),
        make_user(3, "M003", Role.MODERATOR, 3, name="Moderator Three"),
        make_user(4, "HR003", Role.HR_ASSISTANT, 3, name="HR Three"),
        make_user(5, "T301", Role.TEACHER, 3, name="Teacher One", class_id=31, schedule="08:00-17:00"),
        make_user(6, "T302", Role.TEACHER, 3, name="Teacher Two", class_id=32),
        make_user(7, "S301", Role.STAFF, 3, name="Staff One", schedule="08:00-17:00"),
        make_user(8, "T701", Role.TEACHER, 7, name="Teacher Seven", class_id=71),
        make_user(9, "H007", Role.HEAD, 7, name="Head Seven"),
        make_user(10, "S302", Role.STAFF, 3, name="Former Staff", status=UserStatus.INACTIVE),
    ]


CLASS_LABELS = {31: "BSE Y2S1 M1", 32: "BSE Y3S2 M2", 71: "BDSE Y2S2 M1"}


class InMemoryUsers:
    def __init__(self, users: List[User]):
        self.by_id: Dict[int, User] = {u.id: u for u in users}
        # ids held by a RESTRICT foreign key (leave responders)
        self.referenced: Set[int] = set()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_unique_id(self, unique_id: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.unique_id == unique_id), None)

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda u: u.name)

    def create(self, user: User) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = replace(user, id=new_id)
        return new_id

    def update(self, user_id: int, changes) -> bool:
        user = self.by_id.get(int(user_id))
        if not user:
            return False
        self.by_id[user.id] = replace(user, **changes)
        return True

    def set_password(self, user_id: int, password_hash: str) -> bool:
        return self.update(user_id, {"password_hash": password_hash})

    def delete(self, user_id: int) -> bool:
        if int(user_id) in self.referenced:
            raise ConflictError("User has responded to leave requests and cannot be deleted; deactivate instead")
        return self.by_id.pop(int(user_id), None) is not None


class InMemoryDepartments:
    def list_all(self):
        return list(DEPARTMENTS.values())

    def get_by_id(self, department_id: int):
        return DEPARTMENTS.get(int(department_id))


class InMemorySchedules:
    def __init__(self):
        self.by_id: Dict[int, Schedule] = {}

    def get_by_id(self, schedule_id: int):
        return self.by_id.get(int(schedule_id))

    def list_for_teacher(self, teacher_id: int):
        return [s for s in self.by_id.values() if s.teacher_id == teacher_id]


def _joined(users: InMemoryUsers, user_id: int) -> dict:
    u = users.get_by_id(user_id)
    if not u:
        return {"user_id": None}
    dept = DEPARTMENTS.get(u.department_id)
    return {
        "user_id": u.id,
        "user_name": u.name,
        "user_unique_id": u.unique_id,
        "user_role": u.role,
        "department_id": u.department_id,
        "department_name": dept.name if dept else None,
        "class_label": CLASS_LABELS.get(u.class_id),
    }


class InMemoryAttendance:
    """Keyed on (user_id, date) like the unique index of the real table."""

    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.records: Dict[tuple, AttendanceRecord] = {}
        self._id = 0

    def get_for_user_and_date(self, user_id: int, day: date):
        return self.records.get((int(user_id), day))

    def upsert_mark(self, *, user_id, day, status, is_late, marked_at, marked_by, schedule_id=None):
        existing = self.records.get((user_id, day))
        if existing:
            rec_id = existing.id
        else:
            self._id += 1
            rec_id = self._id
        rec = AttendanceRecord(
            id=rec_id,
            user_id=user_id,
            date=day,
            status=status,
            is_late=is_late,
            marked_at=marked_at,
            marked_by=marked_by,
            schedule_id=schedule_id,
        )
        self.records[(user_id, day)] = rec
        return rec

    def list_rows(self, *, user_id=None):
        rows = []
        for rec in sorted(self.records.values(), key=lambda r: (r.date, r.id), reverse=True):
            if user_id is not None and rec.user_id != user_id:
                continue
            marker = self._users.get_by_id(rec.marked_by) if rec.marked_by else None
            rows.append(
                AttendanceRow(
                    id=rec.id,
                    date=rec.date,
                    status=rec.status,
                    is_late=rec.is_late,
                    marked_at=rec.marked_at,
                    marked_by=rec.marked_by,
                    schedule_id=rec.schedule_id,
                    marked_by_name=marker.name if marker else None,
                    **_joined(self._users, rec.user_id),
                )
            )
        return rows

    def list_by_date(self, day: date):
        return [r for r in self.records.values() if r.date == day]


class InMemoryLeaves:
    """approve() writes through the attendance fake and undoes both on failure."""

    def __init__(self, users: InMemoryUsers, attendance: InMemoryAttendance):
        self._users = users
        self._attendance = attendance
        self.by_id: Dict[int, LeaveRequest] = {}

    def get_by_id(self, request_id: int):
        return self.by_id.get(int(request_id))

    def create(self, *, user_id, leave_type, start_date, end_date, reason, submitted_at) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = LeaveRequest(
            id=new_id,
            user_id=user_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            submitted_at=submitted_at,
        )
        return new_id

    def respond(self, *, request_id, status, responded_at, responded_by, rejection_reason=None) -> bool:
        req = self.by_id.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.by_id[req.id] = replace(
            req,
            status=status,
            responded_at=responded_at,
            responded_by=responded_by,
            rejection_reason=rejection_reason,
        )
        self._users.referenced.add(responded_by)
        return True

    def approve(self, *, request_id, user_id, days, responded_at, responded_by) -> bool:
        req = self.by_id.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        before = dict(self._attendance.records)
        try:
            for day in days:
                self._attendance.upsert_mark(
                    user_id=user_id,
                    day=day,
                    status=AttendanceStatus.LEAVE,
                    is_late=False,
                    marked_at=responded_at,
                    marked_by=responded_by,
                )
        except Exception:
            self._attendance.records = before
            raise
        self.by_id[req.id] = replace(
            req, status=LeaveStatus.APPROVED, responded_at=responded_at, responded_by=responded_by
        )
        self._users.referenced.add(responded_by)
        return True

    def list_rows(self, *, user_id=None):
        rows = []
        for req in sorted(self.by_id.values(), key=lambda r: r.id, reverse=True):
            if user_id is not None and req.user_id != user_id:
                continue
            joined = _joined(self._users, req.user_id)
            rows.append(
                LeaveRow(
                    id=req.id,
                    leave_type=req.leave_type,
                    start_date=req.start_date,
                    end_date=req.end_date,
                    reason=req.reason,
                    status=req.status,
                    rejection_reason=req.rejection_reason,
                    submitted_at=req.submitted_at,
                    responded_at=req.responded_at,
                    responded_by=req.responded_by,
                    **joined,
                )
            )
        return rows

    def list_approved_covering(self, day: date):
        return [r for r in self.by_id.values() if r.status == LeaveStatus.APPROVED and r.covers(day)]


def session_user(users: InMemoryUsers, unique_id: str) -> SessionUser:
    return SessionUser.from_user(users.get_by_unique_id(unique_id))


@pytest.fixture
def fixed_now() -> datetime:
    # a Wednesday
    return datetime(2025, 3, 12, 9, 30, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(default_users())


@pytest.fixture
def attendance_repo(users_repo) -> InMemoryAttendance:
    return InMemoryAttendance(users_repo)


@pytest.fixture
def leaves_repo(users_repo, attendance_repo) -> InMemoryLeaves:
    return InMemoryLeaves(users_repo, attendance_repo)


@pytest.fixture
def schedules_repo() -> InMemorySchedules:
    return InMemorySchedules()


@pytest.fixture
def container(users_repo, attendance_repo, leaves_repo, schedules_repo, fixed_now):
    return wire(
        users_repo=users_repo,
        departments_repo=InMemoryDepartments(),
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        schedules_repo=schedules_repo,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def as_user(users_repo):
    """``as_user("H003")`` -> SessionUser of that seeded account."""
    return lambda unique_id: session_user(users_repo, unique_id)


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from staff_attendance.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(unique_id: str, password: str = PASSWORD):
        resp = client.post("/api/login", json={"uniqueId": unique_id, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login


def mark(repo: InMemoryAttendance, user_id: int, day: date, status: AttendanceStatus, marked_at=None):
    return repo.upsert_mark(
        user_id=user_id,
        day=day,
        status=status,
        is_late=False,
        marked_at=marked_at or datetime.combine(day, datetime.min.time()).replace(hour=8),
        marked_by=3,
    )


@pytest.fixture
def seed_mark(attendance_repo):
    return lambda user_id, day, status, marked_at=None: mark(attendance_repo, user_id, day, status, marked_at)
