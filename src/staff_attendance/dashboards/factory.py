from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from ..core.enums import Role
from .strategies.admin_strategy import AdminStrategy
from .strategies.base import DashboardStrategy
from .strategies.head_strategy import HeadStrategy
from .strategies.marker_strategies import HRAssistantStrategy, ModeratorStrategy
from .strategies.personal_strategy import PersonalStrategy


@dataclass
class DashboardStrategyFactory:
    """Factory Pattern: one dashboard strategy per role."""

    _by_role: Dict[Role, DashboardStrategy] = field(
        default_factory=lambda: {
            Role.ADMIN: AdminStrategy(),
            Role.HEAD: HeadStrategy(),
            Role.MODERATOR: ModeratorStrategy(),
            Role.HR_ASSISTANT: HRAssistantStrategy(),
            Role.TEACHER: PersonalStrategy(),
            Role.STAFF: PersonalStrategy(),
        }
    )

    def for_role(self, role: Role) -> DashboardStrategy:
        return self._by_role[Role(role)]
