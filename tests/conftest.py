"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models only use portable column types,
so the real ``Base.metadata`` is created directly.
"""

from typing import AsyncGenerator, Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.domain.entities import Driver, Profile, Ride, Wallet, WithdrawalRequest
from src.domain.enums import (
    DriverStatus,
    RideStatus,
    UserRole,
    VehicleType,
    WithdrawalStatus,
)
from src.infrastructure.database import Base
from src.infrastructure.store import DataStore


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Row builders ──────────────────────────────────────────────────────


async def add_profile(
    store: DataStore,
    user_id: str,
    role: UserRole = UserRole.CUSTOMER,
    full_name: Optional[str] = None,
) -> Profile:
    profile = await store.profiles.create(
        user_id=user_id,
        full_name=full_name or f"User {user_id}",
        email=f"{user_id}@example.com",
        role=role,
    )
    await store.commit()
    return profile


async def add_driver(
    store: DataStore,
    user_id: str,
    status: DriverStatus = DriverStatus.PENDING,
    vehicle_type: VehicleType = VehicleType.SEDAN,
    is_available: bool = False,
) -> Driver:
    driver = await store.drivers.create(
        user_id=user_id,
        vehicle_type=vehicle_type,
        vehicle_model="Maruti Dzire",
        vehicle_plate=f"MH01-{user_id}",
        license_number=f"DL-{user_id}",
        rc_number=f"RC-{user_id}",
        status=status,
        is_available=is_available,
    )
    await store.commit()
    return driver


async def add_wallet(store: DataStore, driver_id: str, balance: float = 0.0) -> Wallet:
    wallet = await store.wallets.create(
        driver_id=driver_id, balance=balance, total_earned=balance
    )
    await store.commit()
    return wallet


async def add_ride(
    store: DataStore,
    customer_id: str,
    status: RideStatus = RideStatus.REQUESTED,
    driver_id: Optional[str] = None,
    vehicle_type: VehicleType = VehicleType.SEDAN,
    final_fare: Optional[float] = None,
    estimated_fare: Optional[float] = 180.0,
) -> Ride:
    ride = await store.rides.create(
        customer_id=customer_id,
        driver_id=driver_id,
        pickup_location="Mumbai Airport T2",
        dropoff_location="Andheri West",
        vehicle_type=vehicle_type,
        status=status,
        estimated_fare=estimated_fare,
        final_fare=final_fare,
    )
    await store.commit()
    return ride


async def add_withdrawal(
    store: DataStore,
    driver_id: str,
    wallet_id: str,
    amount: float = 500.0,
    status: WithdrawalStatus = WithdrawalStatus.PENDING,
) -> WithdrawalRequest:
    withdrawal = await store.withdrawals.create(
        driver_id=driver_id, wallet_id=wallet_id, amount=amount, status=status
    )
    await store.commit()
    return withdrawal


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with every table created."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def store(session_factory) -> AsyncGenerator[DataStore, None]:
    async with session_factory() as session:
        yield DataStore(session)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by the SQLite test database."""

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from src.api.app import create_app
    from src.api.dependencies import get_db
    from src.api.middleware import limiter

    limiter.reset()
    app = create_app()
    app.dependency_overrides[get_db] = _test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
