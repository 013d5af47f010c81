"""
Driver dashboard tests.

Happy paths run against the SQLite store; failure paths use an
``AsyncMock`` store whose repository calls raise ``SQLAlchemyError``.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from src.domain.entities import Driver, Ride, Wallet
from src.domain.enums import DriverStatus, RideStatus, UserRole, VehicleType
from src.views.driver import (
    NOT_REGISTERED,
    DriverDashboard,
    DriverRegistration,
    load_driver_dashboard,
    register_driver,
    request_withdrawal,
    toggle_availability,
    update_ride_status,
)
from tests.conftest import add_driver, add_profile, add_ride, add_wallet


DRIVER = "drv-0001"
CUSTOMER = "cust-0001"


def _failing_store(*methods: str) -> AsyncMock:
    store = AsyncMock()
    for path in methods:
        repo, method = path.split(".")
        getattr(getattr(store, repo), method).side_effect = SQLAlchemyError("connection reset")
    return store


async def _seed_approved_driver(store, balance: float = 0.0):
    await add_profile(store, DRIVER, role=UserRole.DRIVER)
    await add_profile(store, CUSTOMER)
    await add_driver(store, DRIVER, status=DriverStatus.APPROVED)
    await add_wallet(store, DRIVER, balance=balance)


# ── Loading ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_unregistered_driver_gets_empty_dashboard(store):
    await add_profile(store, DRIVER, role=UserRole.DRIVER)
    dashboard = await load_driver_dashboard(store, DRIVER)
    assert not dashboard.registered
    assert dashboard.wallet is None
    assert dashboard.open_requests == []


@pytest.mark.asyncio
async def test_approved_driver_sees_open_requests_for_their_vehicle(store):
    await _seed_approved_driver(store)
    await add_ride(store, CUSTOMER, vehicle_type=VehicleType.SEDAN)
    await add_ride(store, CUSTOMER, vehicle_type=VehicleType.SUV)

    dashboard = await load_driver_dashboard(store, DRIVER)

    assert dashboard.registered
    assert len(dashboard.open_requests) == 1
    assert dashboard.open_requests[0].vehicle_type == VehicleType.SEDAN


@pytest.mark.asyncio
async def test_pending_driver_sees_no_open_requests(store):
    await add_profile(store, DRIVER, role=UserRole.DRIVER)
    await add_profile(store, CUSTOMER)
    await add_driver(store, DRIVER, status=DriverStatus.PENDING)
    await add_ride(store, CUSTOMER)

    dashboard = await load_driver_dashboard(store, DRIVER)
    assert dashboard.open_requests == []


# ── Availability ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_toggle_goes_online_and_persists(store):
    await _seed_approved_driver(store)
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await toggle_availability(store, dashboard, DRIVER)

    assert dashboard.is_available is True
    assert dashboard.notice.level == "success"
    assert dashboard.notice.message == "You are now online!"
    reloaded = await store.drivers.get_by_user_id(DRIVER)
    assert reloaded.is_available is True


@pytest.mark.asyncio
async def test_toggle_twice_goes_back_offline(store):
    await _seed_approved_driver(store)
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await toggle_availability(store, dashboard, DRIVER)
    dashboard = await toggle_availability(store, dashboard, DRIVER)

    assert dashboard.is_available is False
    assert dashboard.notice.message == "You are now offline"


@pytest.mark.asyncio
async def test_toggle_failure_keeps_flag():
    store = _failing_store("drivers.set_availability")
    state = DriverDashboard(driver=Driver(user_id=DRIVER), is_available=False)

    result = await toggle_availability(store, state, DRIVER)

    assert result.is_available is False
    assert result.notice.level == "error"
    assert result.notice.message == "Failed to update availability"
    store.rollback.assert_awaited_once()
    store.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_toggle_without_registration_issues_no_write():
    store = AsyncMock()
    result = await toggle_availability(store, DriverDashboard(), DRIVER)
    assert result.notice.message == NOT_REGISTERED
    store.drivers.set_availability.assert_not_awaited()


# ── Withdrawals ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_zero_balance_withdrawal_inserts_nothing():
    store = AsyncMock()
    state = DriverDashboard(driver=Driver(user_id=DRIVER), wallet=Wallet(id="w1", balance=0.0))

    result = await request_withdrawal(store, state, DRIVER)

    assert result.notice.message == "Insufficient balance for withdrawal"
    store.withdrawals.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_wallet_withdrawal_inserts_nothing():
    store = AsyncMock()
    result = await request_withdrawal(store, DriverDashboard(driver=Driver()), DRIVER)
    assert result.notice.level == "error"
    store.withdrawals.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_withdrawal_requests_full_balance(store):
    await _seed_approved_driver(store, balance=1250.0)
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await request_withdrawal(store, dashboard, DRIVER)

    assert dashboard.notice.message == "Withdrawal request submitted successfully"
    assert len(dashboard.withdrawals) == 1
    withdrawal = dashboard.withdrawals[0]
    assert withdrawal.amount == 1250.0
    assert withdrawal.wallet_id == dashboard.wallet.id
    assert withdrawal.status.value == "pending"
    # the wallet itself is not debited on request
    wallet = await store.wallets.get_by_driver(DRIVER)
    assert wallet.balance == 1250.0


@pytest.mark.asyncio
async def test_withdrawal_failure_keeps_list():
    store = _failing_store("withdrawals.create")
    state = DriverDashboard(driver=Driver(user_id=DRIVER), wallet=Wallet(id="w1", balance=10.0))

    result = await request_withdrawal(store, state, DRIVER)

    assert result.notice.message == "Failed to request withdrawal"
    assert result.withdrawals == []
    store.rollback.assert_awaited_once()


# ── Registration ──────────────────────────────────────────────────────


def _registration() -> DriverRegistration:
    return DriverRegistration(
        vehicle_type=VehicleType.MINI,
        vehicle_model="Hyundai i10",
        vehicle_plate="MH02-AB-1234",
        license_number="MH0220190001234",
        rc_number="RC-998877",
    )


@pytest.mark.asyncio
async def test_register_creates_pending_driver_and_wallet(store):
    await add_profile(store, DRIVER, role=UserRole.DRIVER)
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await register_driver(store, dashboard, DRIVER, _registration())

    assert dashboard.notice.level == "success"
    assert dashboard.driver.status == DriverStatus.PENDING
    assert dashboard.driver.is_available is False
    assert dashboard.wallet is not None
    assert dashboard.wallet.balance == 0.0
    assert (await store.wallets.get_by_driver(DRIVER)) is not None


@pytest.mark.asyncio
async def test_register_twice_is_refused():
    store = AsyncMock()
    state = DriverDashboard(driver=Driver(user_id=DRIVER))
    result = await register_driver(store, state, DRIVER, _registration())
    assert result.notice.message == "Driver registration already exists"
    store.drivers.create.assert_not_awaited()


# ── Ride lifecycle ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_accept_start_complete(store):
    await _seed_approved_driver(store)
    ride = await add_ride(store, CUSTOMER, estimated_fare=180.0)
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await update_ride_status(store, dashboard, DRIVER, ride.id, RideStatus.ACCEPTED)
    assert dashboard.notice.message == "Ride accepted"
    assert dashboard.open_requests == []

    dashboard = await update_ride_status(store, dashboard, DRIVER, ride.id, RideStatus.IN_PROGRESS)
    assert dashboard.notice.message == "Ride in progress"

    dashboard = await update_ride_status(store, dashboard, DRIVER, ride.id, RideStatus.COMPLETED)
    assert dashboard.notice.message == "Ride completed"

    saved = await store.rides.get_by_id(ride.id)
    assert saved.driver_id == DRIVER
    assert saved.status == RideStatus.COMPLETED
    assert saved.final_fare == 180.0
    assert saved.accepted_at is not None
    assert saved.started_at is not None
    assert saved.completed_at is not None
    assert saved.cancelled_at is None


@pytest.mark.asyncio
async def test_illegal_transition_is_reported(store):
    await _seed_approved_driver(store)
    ride = await add_ride(store, CUSTOMER, status=RideStatus.ACCEPTED, driver_id=DRIVER)
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await update_ride_status(store, dashboard, DRIVER, ride.id, RideStatus.COMPLETED)

    assert dashboard.notice.level == "error"
    assert dashboard.notice.message == "Cannot transition from accepted to completed"
    saved = await store.rides.get_by_id(ride.id)
    assert saved.status == RideStatus.ACCEPTED
    assert saved.completed_at is None
    assert saved.final_fare is None


@pytest.mark.asyncio
async def test_pending_driver_cannot_accept(store):
    await add_profile(store, DRIVER, role=UserRole.DRIVER)
    await add_profile(store, CUSTOMER)
    await add_driver(store, DRIVER, status=DriverStatus.PENDING)
    ride = await add_ride(store, CUSTOMER)
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await update_ride_status(store, dashboard, DRIVER, ride.id, RideStatus.ACCEPTED)

    assert dashboard.notice.message == "Only approved drivers can accept rides"
    assert (await store.rides.get_by_id(ride.id)).driver_id is None


@pytest.mark.asyncio
async def test_cannot_accept_ride_for_another_vehicle_type(store):
    await add_profile(store, DRIVER, role=UserRole.DRIVER)
    await add_profile(store, CUSTOMER)
    await add_driver(store, DRIVER, status=DriverStatus.APPROVED, vehicle_type=VehicleType.MINI)
    ride = await add_ride(store, CUSTOMER, vehicle_type=VehicleType.SUV)
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await update_ride_status(store, dashboard, DRIVER, ride.id, RideStatus.ACCEPTED)

    assert dashboard.notice.level == "error"
    assert dashboard.notice.message == "This ride needs a suv vehicle"
    saved = await store.rides.get_by_id(ride.id)
    assert saved.status == RideStatus.REQUESTED
    assert saved.driver_id is None


@pytest.mark.asyncio
async def test_other_drivers_ride_is_not_found(store):
    await _seed_approved_driver(store)
    await add_profile(store, "drv-0002", role=UserRole.DRIVER)
    ride = await add_ride(store, CUSTOMER, status=RideStatus.ACCEPTED, driver_id="drv-0002")
    dashboard = await load_driver_dashboard(store, DRIVER)

    dashboard = await update_ride_status(
        store, dashboard, DRIVER, ride.id, RideStatus.IN_PROGRESS
    )
    assert dashboard.notice.message == "Ride not found"


@pytest.mark.asyncio
async def test_ride_update_failure_rolls_back():
    store = _failing_store("rides.update")
    store.rides.get_by_id.return_value = Ride(
        id="r1", customer_id=CUSTOMER, driver_id=DRIVER, status=RideStatus.ACCEPTED
    )
    state = DriverDashboard(driver=Driver(user_id=DRIVER, status=DriverStatus.APPROVED))

    result = await update_ride_status(store, state, DRIVER, "r1", RideStatus.IN_PROGRESS)

    assert result.notice.message == "Failed to update ride"
    store.rollback.assert_awaited_once()
