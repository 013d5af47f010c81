"""
Driver dashboard
================

State: the caller's driver row (None until registered), wallet, recent
rides and withdrawals, and open ride requests for the driver's vehicle
type.  Every operation returns a new ``DriverDashboard`` carrying a
``Notice``; on a store failure the previous state is returned unchanged
apart from the notice.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.config import settings
from src.domain.entities import (
    Driver,
    InvalidStateTransition,
    Ride,
    Wallet,
    WithdrawalRequest,
)
from src.domain.enums import RideStatus, VehicleType
from src.infrastructure.store import DataStore
from src.views.common import Notice, fetch_or_keep

logger = logging.getLogger(__name__)

NOT_REGISTERED = "Please complete your driver registration first"


@dataclass
class DriverRegistration:
    vehicle_type: VehicleType
    vehicle_model: str
    vehicle_plate: str
    license_number: str
    rc_number: str
    license_document_url: Optional[str] = None
    rc_document_url: Optional[str] = None
    vehicle_photo_url: Optional[str] = None


@dataclass
class DriverDashboard:
    driver: Optional[Driver] = None
    wallet: Optional[Wallet] = None
    rides: list[Ride] = field(default_factory=list)
    withdrawals: list[WithdrawalRequest] = field(default_factory=list)
    open_requests: list[Ride] = field(default_factory=list)
    is_available: bool = False
    notice: Optional[Notice] = None

    @property
    def registered(self) -> bool:
        return self.driver is not None

    @property
    def can_withdraw(self) -> bool:
        return self.wallet is not None and self.wallet.can_withdraw


async def _open_requests(
    store: DataStore, driver: Optional[Driver], fallback: list[Ride]
) -> list[Ride]:
    if driver is None or not driver.can_take_rides:
        return []
    return await fetch_or_keep(
        store,
        lambda: store.rides.list_open_requests(
            driver.vehicle_type, settings.driver_history_limit
        ),
        fallback,
        "open ride requests",
    )


async def load_driver_dashboard(store: DataStore, user_id: str) -> DriverDashboard:
    limit = settings.driver_history_limit
    driver = await fetch_or_keep(
        store, lambda: store.drivers.get_by_user_id(user_id), None, "driver data"
    )
    wallet = await fetch_or_keep(
        store, lambda: store.wallets.get_by_driver(user_id), None, "wallet"
    )
    rides = await fetch_or_keep(
        store, lambda: store.rides.list_for_driver(user_id, limit), [], "rides"
    )
    withdrawals = await fetch_or_keep(
        store,
        lambda: store.withdrawals.list_for_driver(user_id, limit),
        [],
        "withdrawals",
    )
    return DriverDashboard(
        driver=driver,
        wallet=wallet,
        rides=rides,
        withdrawals=withdrawals,
        open_requests=await _open_requests(store, driver, []),
        is_available=driver.is_available if driver else False,
    )


async def toggle_availability(
    store: DataStore, state: DriverDashboard, user_id: str
) -> DriverDashboard:
    if state.driver is None:
        return replace(state, notice=Notice.error(NOT_REGISTERED))

    online = not state.is_available
    try:
        updated = await store.drivers.set_availability(user_id, online)
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to update availability for %s", user_id)
        await store.rollback()
        return replace(state, notice=Notice.error("Failed to update availability"))

    return replace(
        state,
        driver=updated or replace(state.driver, is_available=online),
        is_available=online,
        notice=Notice.success("You are now online!" if online else "You are now offline"),
    )


async def request_withdrawal(
    store: DataStore, state: DriverDashboard, user_id: str
) -> DriverDashboard:
    """Ask for the whole wallet balance to be paid out."""
    wallet = state.wallet
    if wallet is None or not wallet.can_withdraw:
        return replace(state, notice=Notice.error("Insufficient balance for withdrawal"))

    try:
        await store.withdrawals.create(
            driver_id=user_id, wallet_id=wallet.id, amount=wallet.balance
        )
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to request withdrawal for %s", user_id)
        await store.rollback()
        return replace(state, notice=Notice.error("Failed to request withdrawal"))

    withdrawals = await fetch_or_keep(
        store,
        lambda: store.withdrawals.list_for_driver(user_id, settings.driver_history_limit),
        state.withdrawals,
        "withdrawals",
    )
    return replace(
        state,
        withdrawals=withdrawals,
        notice=Notice.success("Withdrawal request submitted successfully"),
    )


async def register_driver(
    store: DataStore,
    state: DriverDashboard,
    user_id: str,
    registration: DriverRegistration,
) -> DriverDashboard:
    """Create the driver row (pending, offline) and its wallet."""
    if state.driver is not None:
        return replace(state, notice=Notice.error("Driver registration already exists"))

    try:
        driver = await store.drivers.create(user_id=user_id, **asdict(registration))
        wallet = state.wallet or await store.wallets.create(driver_id=user_id)
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to register driver %s", user_id)
        await store.rollback()
        return replace(state, notice=Notice.error("Failed to submit driver registration"))

    logger.info("Driver registration submitted: user=%s plate=%s", user_id, driver.vehicle_plate)
    return replace(
        state,
        driver=driver,
        wallet=wallet,
        is_available=driver.is_available,
        notice=Notice.success("Registration submitted. An admin will review it shortly."),
    )


async def update_ride_status(
    store: DataStore,
    state: DriverDashboard,
    user_id: str,
    ride_id: str,
    new_status: RideStatus,
) -> DriverDashboard:
    """Accept, start, complete or cancel a ride through the state machine."""
    driver = state.driver
    if driver is None:
        return replace(state, notice=Notice.error(NOT_REGISTERED))

    ride = await fetch_or_keep(store, lambda: store.rides.get_by_id(ride_id), None, "ride")
    accepting = new_status == RideStatus.ACCEPTED
    if ride is None or (not accepting and ride.driver_id != user_id):
        return replace(state, notice=Notice.error("Ride not found"))
    if accepting and not driver.can_take_rides:
        return replace(state, notice=Notice.error("Only approved drivers can accept rides"))
    if accepting and ride.vehicle_type != driver.vehicle_type:
        return replace(
            state,
            notice=Notice.error(f"This ride needs a {ride.vehicle_type.value} vehicle"),
        )

    try:
        column = ride.transition_to(new_status)
    except InvalidStateTransition as exc:
        return replace(state, notice=Notice.error(str(exc)))

    values = {"status": ride.status, column: getattr(ride, column)}
    if accepting:
        values["driver_id"] = user_id
    if new_status == RideStatus.COMPLETED and ride.final_fare is None:
        values["final_fare"] = ride.estimated_fare

    try:
        await store.rides.update(ride_id, **values)
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to move ride %s to %s", ride_id, new_status.value)
        await store.rollback()
        return replace(state, notice=Notice.error("Failed to update ride"))

    rides = await fetch_or_keep(
        store,
        lambda: store.rides.list_for_driver(user_id, settings.driver_history_limit),
        state.rides,
        "rides",
    )
    return replace(
        state,
        rides=rides,
        open_requests=await _open_requests(store, driver, state.open_requests),
        notice=Notice.success(f"Ride {new_status.value.replace('_', ' ')}"),
    )
