"""
Admin console
=============

Only a session whose profile role is ``admin`` gets data; anyone else gets
an access-denied state and no query is issued.

Approval mutations
------------------
* ``approve_driver`` / ``reject_driver`` -- write ``drivers.status`` only,
  then re-fetch the driver list and the stats.
* ``approve_withdrawal`` / ``reject_withdrawal`` -- write ``status`` and
  ``processed_at`` only, then re-fetch the withdrawal list.  The wallet
  balance and the ledger are left alone.

Each mutation is offered only for rows the console currently shows as
``pending``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.config import settings
from src.domain.entities import Driver, Ride, WithdrawalRequest, utcnow
from src.domain.enums import DriverStatus, UserRole, WithdrawalStatus
from src.domain.session import Session
from src.infrastructure.store import DataStore
from src.views.common import Notice, fetch_or_keep

logger = logging.getLogger(__name__)

ACCESS_DENIED = "Access denied"


@dataclass
class AdminStats:
    total_rides: int = 0
    active_drivers: int = 0
    pending_approvals: int = 0
    total_earnings: float = 0.0


@dataclass
class DriverListing:
    driver: Driver
    full_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def can_review(self) -> bool:
        return self.driver.status == DriverStatus.PENDING


@dataclass
class WithdrawalListing:
    withdrawal: WithdrawalRequest
    full_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def can_review(self) -> bool:
        return self.withdrawal.status == WithdrawalStatus.PENDING


@dataclass
class AdminConsole:
    stats: AdminStats = field(default_factory=AdminStats)
    drivers: list[DriverListing] = field(default_factory=list)
    rides: list[Ride] = field(default_factory=list)
    withdrawals: list[WithdrawalListing] = field(default_factory=list)
    access_denied: bool = False
    notice: Optional[Notice] = None


# ── Fetches ───────────────────────────────────────────────────────────


async def _read_stats(store: DataStore) -> AdminStats:
    return AdminStats(
        total_rides=await store.rides.count_all(),
        active_drivers=await store.drivers.count_active(),
        pending_approvals=await store.drivers.count_pending(),
        total_earnings=await store.rides.total_completed_fares(),
    )


async def _read_drivers(store: DataStore) -> list[DriverListing]:
    return [
        DriverListing(
            driver=driver,
            full_name=profile.full_name if profile else None,
            email=profile.email if profile else None,
        )
        for driver, profile in await store.drivers.list_with_profiles()
    ]


async def _read_withdrawals(store: DataStore) -> list[WithdrawalListing]:
    return [
        WithdrawalListing(
            withdrawal=withdrawal,
            full_name=profile.full_name if profile else None,
            email=profile.email if profile else None,
        )
        for withdrawal, profile in await store.withdrawals.list_with_profiles()
    ]


async def _refresh_stats(store: DataStore, console: AdminConsole) -> AdminStats:
    return await fetch_or_keep(store, lambda: _read_stats(store), console.stats, "stats")


async def _refresh_drivers(store: DataStore, console: AdminConsole) -> list[DriverListing]:
    return await fetch_or_keep(
        store, lambda: _read_drivers(store), console.drivers, "drivers"
    )


async def _refresh_withdrawals(
    store: DataStore, console: AdminConsole
) -> list[WithdrawalListing]:
    return await fetch_or_keep(
        store, lambda: _read_withdrawals(store), console.withdrawals, "withdrawals"
    )


async def load_admin_console(store: DataStore, session: Session) -> AdminConsole:
    if not session.has_role(UserRole.ADMIN):
        return AdminConsole(access_denied=True)

    empty = AdminConsole()
    return AdminConsole(
        stats=await _refresh_stats(store, empty),
        drivers=await _refresh_drivers(store, empty),
        rides=await fetch_or_keep(
            store,
            lambda: store.rides.list_recent(settings.admin_rides_limit),
            [],
            "rides",
        ),
        withdrawals=await _refresh_withdrawals(store, empty),
    )


# ── Driver approval ───────────────────────────────────────────────────


async def _review_driver(
    store: DataStore,
    console: AdminConsole,
    driver_id: str,
    status: DriverStatus,
    success: str,
    failure: str,
) -> AdminConsole:
    if console.access_denied:
        return replace(console, notice=Notice.error(ACCESS_DENIED))
    listing = next((d for d in console.drivers if d.driver.id == driver_id), None)
    if listing is None or not listing.can_review:
        return replace(console, notice=Notice.error("Driver is not awaiting approval"))

    try:
        await store.drivers.update(driver_id, status=status)
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to set driver %s to %s", driver_id, status.value)
        await store.rollback()
        return replace(console, notice=Notice.error(failure))

    logger.info("Driver %s %s", driver_id, status.value)
    return replace(
        console,
        drivers=await _refresh_drivers(store, console),
        stats=await _refresh_stats(store, console),
        notice=Notice.success(success),
    )


async def approve_driver(
    store: DataStore, console: AdminConsole, driver_id: str
) -> AdminConsole:
    return await _review_driver(
        store,
        console,
        driver_id,
        DriverStatus.APPROVED,
        "Driver approved successfully",
        "Failed to approve driver",
    )


async def reject_driver(
    store: DataStore, console: AdminConsole, driver_id: str
) -> AdminConsole:
    return await _review_driver(
        store,
        console,
        driver_id,
        DriverStatus.REJECTED,
        "Driver rejected",
        "Failed to reject driver",
    )


# ── Withdrawal approval ───────────────────────────────────────────────


async def _review_withdrawal(
    store: DataStore,
    console: AdminConsole,
    withdrawal_id: str,
    status: WithdrawalStatus,
    success: str,
    failure: str,
) -> AdminConsole:
    if console.access_denied:
        return replace(console, notice=Notice.error(ACCESS_DENIED))
    listing = next(
        (w for w in console.withdrawals if w.withdrawal.id == withdrawal_id), None
    )
    if listing is None or not listing.can_review:
        return replace(console, notice=Notice.error("Withdrawal is not pending"))

    try:
        await store.withdrawals.update(
            withdrawal_id, status=status, processed_at=utcnow()
        )
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to set withdrawal %s to %s", withdrawal_id, status.value)
        await store.rollback()
        return replace(console, notice=Notice.error(failure))

    logger.info("Withdrawal %s %s", withdrawal_id, status.value)
    return replace(
        console,
        withdrawals=await _refresh_withdrawals(store, console),
        notice=Notice.success(success),
    )


async def approve_withdrawal(
    store: DataStore, console: AdminConsole, withdrawal_id: str
) -> AdminConsole:
    return await _review_withdrawal(
        store,
        console,
        withdrawal_id,
        WithdrawalStatus.APPROVED,
        "Withdrawal approved",
        "Failed to approve withdrawal",
    )


async def reject_withdrawal(
    store: DataStore, console: AdminConsole, withdrawal_id: str
) -> AdminConsole:
    return await _review_withdrawal(
        store,
        console,
        withdrawal_id,
        WithdrawalStatus.REJECTED,
        "Withdrawal rejected",
        "Failed to reject withdrawal",
    )
