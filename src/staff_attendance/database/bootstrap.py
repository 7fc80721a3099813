from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# (unique_id, name, email, password, role, department short name, class name, work type, schedule)
DEMO_USERS = (
    ("A001", "System Admin", "admin@university.edu", "admin123", "admin", None, None, None, None),
    ("H001", "Dr. Sok Dara", "head.ite@university.edu", "head123", "head", "ITE", None, None, None),
    ("M001", "Chan Vicheka", "moderator.ite@university.edu", "mod123", "moderator", "ITE", None, None, None),
    ("HR001", "Keo Sophea", "hr.ite@university.edu", "hr123", "hr_assistant", "ITE", None, None, None),
    ("T001", "Lim Rithy", "rithy@university.edu", "teacher123", "teacher", "ITE", "BSE Y2S1 M1", "Full-time", "08:00-17:00"),
    ("T002", "Meas Bopha", "bopha@university.edu", "teacher123", "teacher", "DSE", "BDSE Y2S2 M1", "Part-time", "13:00-17:00"),
    ("S001", "Heng Pisey", "pisey@university.edu", "staff123", "staff", "ITE", None, "Office", "08:00-17:00"),
)


def _target(db_config: Union[dict, DBConfig]) -> DatabaseConnection:
    config = db_config if isinstance(db_config, DBConfig) else DBConfig.from_dict(db_config)
    # A fresh factory per call: bootstrap may run before the app singleton exists.
    return DatabaseConnection(config)


def _strip_database_statements(sql: str) -> str:
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    return re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)


def _drop_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def split_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` while ignoring separators inside quoted text."""

    buf: List[str] = []
    quote = None
    escaped = False

    for ch in sql:
        buf.append(ch)
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(target: DatabaseConnection, sql: str) -> int:
    conn = target.connect()
    try:
        cur = conn.cursor()
        count = 0
        for stmt in split_sql_statements(_drop_comments(_strip_database_statements(sql))):
            cur.execute(stmt)
            count += 1
        conn.commit()
        return count
    finally:
        conn.close()


def ensure_database_exists(db_config: Union[dict, DBConfig]) -> None:
    target = _target(db_config)
    conn = target.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Union[dict, DBConfig], *, schema_path: PathLike) -> None:
    ensure_database_exists(db_config)
    count = _run_script(_target(db_config), Path(schema_path).read_text(encoding="utf-8"))
    logger.info("applied %d schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: Union[dict, DBConfig], *, seed_path: PathLike) -> None:
    count = _run_script(_target(db_config), Path(seed_path).read_text(encoding="utf-8"))
    logger.info("applied %d seed statements from %s", count, seed_path)


def ensure_demo_users(db_config: Union[dict, DBConfig]) -> None:
    """Insert (or refresh) one demo account per role with hashed passwords."""

    target = _target(db_config)
    conn = target.connect()
    try:
        cur = conn.cursor(dictionary=True)

        def lookup(sql: str, value) -> Optional[int]:
            if value is None:
                return None
            cur.execute(sql, (value,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Seed data missing for {value!r}; apply seed.sql first")
            return int(row["id"])

        for unique_id, name, email, password, role, dept, class_name, work_type, schedule in DEMO_USERS:
            dept_id = lookup("SELECT id FROM departments WHERE short_name=%s", dept)
            class_id = lookup("SELECT id FROM classes WHERE name=%s", class_name)
            cur.execute(
                """
                INSERT INTO users (unique_id, name, email, password, role, department_id,
                                   class_id, work_type, schedule, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, 'active')
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), email=VALUES(email), password=VALUES(password),
                    department_id=VALUES(department_id), class_id=VALUES(class_id),
                    work_type=VALUES(work_type), schedule=VALUES(schedule), status='active'
                """,
                (unique_id, name, email, generate_password_hash(password), role, dept_id,
                 class_id, work_type, schedule),
            )
        conn.commit()
        logger.info("ensured %d demo users", len(DEMO_USERS))
    finally:
        conn.close()


def list_tables(db_config: Union[dict, DBConfig]) -> List[str]:
    conn = _target(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
