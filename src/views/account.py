"""The caller's own profile and the view their session is routed to."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.domain.entities import Profile
from src.domain.session import Session, ViewName, select_view
from src.infrastructure.store import DataStore
from src.views.common import Notice

logger = logging.getLogger(__name__)

# role is not user-editable
EDITABLE_PROFILE_FIELDS = frozenset({"full_name", "phone"})


@dataclass
class AccountView:
    view: ViewName
    profile: Optional[Profile] = None
    notice: Optional[Notice] = None


def load_account(session: Session) -> AccountView:
    return AccountView(view=select_view(session), profile=session.profile)


async def update_profile(
    store: DataStore, account: AccountView, changes: dict
) -> AccountView:
    if account.profile is None:
        return replace(account, notice=Notice.error("Profile not found"))
    values = {k: v for k, v in changes.items() if k in EDITABLE_PROFILE_FIELDS}
    if not values:
        return replace(account, notice=Notice.info("Nothing to update"))

    try:
        profile = await store.profiles.update(account.profile.id, **values)
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to update profile %s", account.profile.id)
        await store.rollback()
        return replace(account, notice=Notice.error("Failed to update profile"))

    return replace(
        account,
        profile=profile or account.profile,
        notice=Notice.success("Profile updated"),
    )
