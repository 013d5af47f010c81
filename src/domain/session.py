"""Resolved identity of the caller and the role-keyed view selector."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from .entities import Profile
from .enums import UserRole


class ViewName(str, enum.Enum):
    LOADING = "loading"
    AUTH = "auth"
    INDEX = "index"
    CUSTOMER = "customer"
    DRIVER = "driver"
    ADMIN = "admin"


_ROLE_VIEWS: dict[UserRole, ViewName] = {
    UserRole.CUSTOMER: ViewName.CUSTOMER,
    UserRole.DRIVER: ViewName.DRIVER,
    UserRole.ADMIN: ViewName.ADMIN,
}


@dataclass(frozen=True)
class Session:
    user_id: Optional[str] = None
    profile: Optional[Profile] = None
    loading: bool = False

    @property
    def role(self) -> Optional[UserRole]:
        return self.profile.role if self.profile else None

    def has_role(self, role: UserRole) -> bool:
        return self.user_id is not None and self.role == role


def select_view(session: Session) -> ViewName:
    """Pick the single view a resolved session is routed to."""
    if session.loading:
        return ViewName.LOADING
    if session.user_id is None:
        return ViewName.AUTH
    if session.profile is None:
        return ViewName.INDEX
    return _ROLE_VIEWS.get(session.profile.role, ViewName.CUSTOMER)
