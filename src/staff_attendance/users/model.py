from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """A staff member who can log in.

    ``schedule`` is a working-hours string such as ``"08:00-17:00"``.
    """

    id: int
    unique_id: str
    name: str
    password_hash: str
    role: Role
    department_id: Optional[int] = None
    email: Optional[str] = None
    class_id: Optional[int] = None
    work_type: Optional[str] = None
    schedule: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE


@dataclass(frozen=True)
class Department:
    id: int
    name: str
    short_name: str


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login.

    Also serves as the ``viewer`` every scoping decision is made for.
    """

    user_id: int
    unique_id: str
    name: str
    role: Role
    department_id: Optional[int] = None

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            user_id=user.id,
            unique_id=user.unique_id,
            name=user.name,
            role=user.role,
            department_id=user.department_id,
        )
