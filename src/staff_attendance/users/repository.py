from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import Department, User


class UserRepository(Protocol):
    """Persistence contract for users; services never see SQL."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_unique_id(self, unique_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create(self, user: User) -> int:
        raise NotImplementedError

    def update(self, user_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def set_password(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def delete(self, user_id: int) -> bool:
        """Raises ConflictError while leave requests still name the user as responder."""
        raise NotImplementedError


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError
