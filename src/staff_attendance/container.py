from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboards.factory import DashboardStrategyFactory
from .dashboards.service import MetricsService
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .users.mysql_user_repository import MySQLDepartmentRepository, MySQLUserRepository
from .users.repository import DepartmentRepository, UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    departments_repo: DepartmentRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    schedules_repo: ScheduleRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    leave_service: LeaveService
    metrics_service: MetricsService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    users_repo: UserRepository,
    departments_repo: DepartmentRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    schedules_repo: ScheduleRepository,
    conn: Optional[DatabaseConnection] = None,
    **service_kwargs,
) -> Container:
    """Build services on top of any repository implementations.

    ``service_kwargs`` (e.g. ``clock=``) are passed to the time-aware services.
    """

    strategies = DashboardStrategyFactory()
    return Container(
        conn=conn,
        users_repo=users_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        schedules_repo=schedules_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, departments_repo, strategy_factory=strategies),
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            leaves_repo,
            schedules_repo,
            strategy_factory=strategies,
            **service_kwargs,
        ),
        leave_service=LeaveService(
            leaves_repo, users_repo, strategy_factory=strategies, **service_kwargs
        ),
        metrics_service=MetricsService(
            users_repo, attendance_repo, leaves_repo, strategy_factory=strategies, **service_kwargs
        ),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
    )
