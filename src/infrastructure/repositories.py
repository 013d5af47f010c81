"""
Repository Pattern -- abstracts DB access so the views stay DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
view-relevant queries only.  Rows are converted into the dataclasses of
``src.domain.entities`` on the way out, so nothing above this layer touches
an ORM object.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    DriverModel,
    ProfileModel,
    RideModel,
    WalletModel,
    WithdrawalModel,
)
from src.domain.entities import (
    Driver,
    Profile,
    Ride,
    Wallet,
    WithdrawalRequest,
)
from src.domain.enums import DriverStatus, RideStatus, VehicleType


def to_entity(row: Any, entity_cls: type) -> Any:
    return entity_cls(**{f.name: getattr(row, f.name) for f in fields(entity_cls)})


class _Repository:
    model: type
    entity: type

    def __init__(self, session: AsyncSession):
        self.session = session

    def _entity(self, row):
        return to_entity(row, self.entity) if row is not None else None

    async def _add(self, **values):
        row = self.model(**values)
        self.session.add(row)
        await self.session.flush()
        return self._entity(row)

    async def get_by_id(self, row_id: str):
        return self._entity(await self.session.get(self.model, row_id))

    async def update(self, row_id: str, **values):
        """Write *values* onto one row.  Returns None if the row is gone."""
        row = await self.session.get(self.model, row_id)
        if row is None:
            return None
        for column, value in values.items():
            setattr(row, column, value)
        await self.session.flush()
        return self._entity(row)


class ProfileRepository(_Repository):
    model = ProfileModel
    entity = Profile

    async def create(self, **values) -> Profile:
        return await self._add(**values)

    async def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        result = await self.session.execute(
            select(ProfileModel).where(ProfileModel.user_id == user_id)
        )
        return self._entity(result.scalars().first())


class DriverRepository(_Repository):
    model = DriverModel
    entity = Driver

    async def create(self, **values) -> Driver:
        return await self._add(**values)

    async def get_by_user_id(self, user_id: str) -> Optional[Driver]:
        result = await self.session.execute(
            select(DriverModel).where(DriverModel.user_id == user_id)
        )
        return self._entity(result.scalars().first())

    async def set_availability(self, user_id: str, is_available: bool) -> Optional[Driver]:
        result = await self.session.execute(
            select(DriverModel).where(DriverModel.user_id == user_id)
        )
        row = result.scalars().first()
        if row is None:
            return None
        row.is_available = is_available
        await self.session.flush()
        return self._entity(row)

    async def list_with_profiles(self) -> list[tuple[Driver, Optional[Profile]]]:
        result = await self.session.execute(
            select(DriverModel, ProfileModel)
            .outerjoin(ProfileModel, ProfileModel.user_id == DriverModel.user_id)
            .order_by(DriverModel.created_at.desc())
        )
        return [
            (to_entity(driver, Driver), to_entity(profile, Profile) if profile else None)
            for driver, profile in result.all()
        ]

    async def count_active(self) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(DriverModel)
            .where(DriverModel.status == DriverStatus.APPROVED)
            .where(DriverModel.is_available.is_(True))
        )
        return result.scalar() or 0

    async def count_pending(self) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(DriverModel)
            .where(DriverModel.status == DriverStatus.PENDING)
        )
        return result.scalar() or 0


class RideRepository(_Repository):
    model = RideModel
    entity = Ride

    async def create(self, **values) -> Ride:
        return await self._add(**values)

    async def list_for_driver(self, driver_id: str, limit: int) -> list[Ride]:
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.driver_id == driver_id)
            .order_by(RideModel.created_at.desc())
            .limit(limit)
        )
        return [self._entity(r) for r in result.scalars().all()]

    async def list_for_customer(self, customer_id: str) -> list[Ride]:
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.customer_id == customer_id)
            .order_by(RideModel.created_at.desc())
        )
        return [self._entity(r) for r in result.scalars().all()]

    async def list_open_requests(self, vehicle_type: VehicleType, limit: int) -> list[Ride]:
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.status == RideStatus.REQUESTED)
            .where(RideModel.vehicle_type == vehicle_type)
            .order_by(RideModel.requested_at)
            .limit(limit)
        )
        return [self._entity(r) for r in result.scalars().all()]

    async def list_recent(self, limit: int) -> list[Ride]:
        result = await self.session.execute(
            select(RideModel).order_by(RideModel.created_at.desc()).limit(limit)
        )
        return [self._entity(r) for r in result.scalars().all()]

    async def count_all(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(RideModel))
        return result.scalar() or 0

    async def total_completed_fares(self) -> float:
        result = await self.session.execute(
            select(func.coalesce(func.sum(RideModel.final_fare), 0.0)).where(
                RideModel.status == RideStatus.COMPLETED
            )
        )
        return float(result.scalar() or 0.0)


class WalletRepository(_Repository):
    model = WalletModel
    entity = Wallet

    async def create(self, **values) -> Wallet:
        return await self._add(**values)

    async def get_by_driver(self, driver_id: str) -> Optional[Wallet]:
        result = await self.session.execute(
            select(WalletModel).where(WalletModel.driver_id == driver_id)
        )
        return self._entity(result.scalars().first())


class WithdrawalRepository(_Repository):
    model = WithdrawalModel
    entity = WithdrawalRequest

    async def create(self, **values) -> WithdrawalRequest:
        return await self._add(**values)

    async def list_for_driver(self, driver_id: str, limit: int) -> list[WithdrawalRequest]:
        result = await self.session.execute(
            select(WithdrawalModel)
            .where(WithdrawalModel.driver_id == driver_id)
            .order_by(WithdrawalModel.created_at.desc())
            .limit(limit)
        )
        return [self._entity(w) for w in result.scalars().all()]

    async def list_with_profiles(
        self,
    ) -> list[tuple[WithdrawalRequest, Optional[Profile]]]:
        result = await self.session.execute(
            select(WithdrawalModel, ProfileModel)
            .outerjoin(ProfileModel, ProfileModel.user_id == WithdrawalModel.driver_id)
            .order_by(WithdrawalModel.created_at.desc())
        )
        return [
            (
                to_entity(withdrawal, WithdrawalRequest),
                to_entity(profile, Profile) if profile else None,
            )
            for withdrawal, profile in result.all()
        ]
