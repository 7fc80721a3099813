from __future__ import annotations

from datetime import date, datetime

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from staff_attendance.core.exceptions import ConflictError
from staff_attendance.leaves.mysql_leave_repository import MySQLLeaveRepository
from staff_attendance.users.mysql_user_repository import MySQLUserRepository

DAYS = [date(2025, 3, 13), date(2025, 3, 14), date(2025, 3, 15)]
NOW = datetime(2025, 3, 12, 9, 30)


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self._conn = conn
        self.rowcount = 0

    def _run(self, kind, sql, params):
        sql = " ".join(sql.split())
        self._conn.statements.append((kind, sql, params))
        if self._conn.fail_on and self._conn.fail_on in sql:
            raise self._conn.error
        self.rowcount = self._conn.rowcount

    def execute(self, sql, params=()):
        self._run("execute", sql, params)

    def executemany(self, sql, seq_params):
        self._run("executemany", sql, list(seq_params))

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, rowcount=1, fail_on=None, error=None):
        self.rowcount = rowcount
        self.fail_on = fail_on
        self.error = error
        self.statements = []
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    database = "staff_attendance_test"

    def __init__(self, **conn_kwargs):
        self._conn_kwargs = conn_kwargs
        self.connections = []

    def connect(self, *, with_database=True):
        conn = FakeConnection(**self._conn_kwargs)
        self.connections.append(conn)
        return conn


def approve(repo):
    return repo.approve(request_id=4, user_id=5, days=DAYS, responded_at=NOW, responded_by=2)


def test_approve_writes_request_and_leave_days_in_one_transaction():
    factory = FakeConnFactory()
    assert approve(MySQLLeaveRepository(factory)) is True

    assert len(factory.connections) == 1
    conn = factory.connections[0]
    kinds = [kind for kind, _, _ in conn.statements]
    assert kinds == ["execute", "executemany"]
    assert "WHERE id=%s AND status='pending'" in conn.statements[0][1]
    assert conn.statements[1][2] == [(5, day, NOW, 2) for day in DAYS]
    assert conn.committed and not conn.rolled_back


def test_failed_leave_day_insert_rolls_back_the_approval():
    factory = FakeConnFactory(fail_on="INSERT INTO attendance", error=RuntimeError("lost connection"))
    with pytest.raises(RuntimeError):
        approve(MySQLLeaveRepository(factory))

    conn = factory.connections[0]
    assert conn.rolled_back and not conn.committed


def test_approve_of_non_pending_request_writes_no_attendance():
    factory = FakeConnFactory(rowcount=0)
    assert approve(MySQLLeaveRepository(factory)) is False
    assert [kind for kind, _, _ in factory.connections[0].statements] == ["execute"]


def test_deleting_a_leave_responder_is_a_conflict():
    error = IntegrityError(msg="Cannot delete or update a parent row", errno=errorcode.ER_ROW_IS_REFERENCED_2)
    factory = FakeConnFactory(fail_on="DELETE FROM users", error=error)
    with pytest.raises(ConflictError):
        MySQLUserRepository(factory).delete(2)
    assert factory.connections[0].rolled_back


def test_other_integrity_errors_propagate():
    error = IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    factory = FakeConnFactory(fail_on="DELETE FROM users", error=error)
    with pytest.raises(IntegrityError):
        MySQLUserRepository(factory).delete(2)
