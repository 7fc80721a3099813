from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import Role, UserStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Department, User
from .repository import DepartmentRepository, UserRepository

_USER_COLUMNS = (
    "id, unique_id, name, email, password, role, department_id, class_id, work_type, schedule, status"
)

# Columns an update may touch. role and unique_id are fixed at creation.
UPDATABLE_COLUMNS = ("name", "email", "department_id", "class_id", "work_type", "schedule", "status")


def _row_to_user(row: Dict[str, Any]) -> User:
    return User(
        id=int(row["id"]),
        unique_id=row["unique_id"],
        name=row["name"],
        email=row.get("email"),
        password_hash=row["password"],
        role=Role(row["role"]),
        department_id=row.get("department_id"),
        class_id=row.get("class_id"),
        work_type=row.get("work_type"),
        schedule=row.get("schedule"),
        status=UserStatus(row.get("status") or UserStatus.ACTIVE.value),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: Any) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("id", int(user_id))

    def get_by_unique_id(self, unique_id: str) -> Optional[User]:
        return self._get_one("unique_id", unique_id)

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY name")
            return [_row_to_user(r) for r in fetchall(cur)]

    def create(self, user: User) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(unique_id, name, email, password, role, department_id,
                                  class_id, work_type, schedule, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user.unique_id,
                    user.name,
                    user.email,
                    user.password_hash,
                    user.role.value,
                    user.department_id,
                    user.class_id,
                    user.work_type,
                    user.schedule,
                    user.status.value,
                ),
            )
            return int(cur.lastrowid)

    def update(self, user_id: int, changes: Dict[str, Any]) -> bool:
        fields = [c for c in UPDATABLE_COLUMNS if c in changes]
        if not fields:
            return False
        params = []
        for c in fields:
            value = changes[c]
            params.append(value.value if isinstance(value, UserStatus) else value)
        assignments = ", ".join(f"{c}=%s" for c in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {assignments} WHERE id=%s", (*params, int(user_id)))
            return cur.rowcount > 0

    def set_password(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password=%s WHERE id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def delete(self, user_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM users WHERE id=%s", (int(user_id),))
                return cur.rowcount > 0
        except IntegrityError as exc:
            if exc.errno != errorcode.ER_ROW_IS_REFERENCED_2:
                raise
            raise ConflictError("User has responded to leave requests and cannot be deleted; deactivate instead")


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, short_name FROM departments ORDER BY name")
            return [Department(id=int(r["id"]), name=r["name"], short_name=r["short_name"]) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, short_name FROM departments WHERE id=%s", (int(department_id),))
            r = fetchone(cur)
            return Department(id=int(r["id"]), name=r["name"], short_name=r["short_name"]) if r else None
