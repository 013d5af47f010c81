"""
Unit of work over one ``AsyncSession``.

Bundles the repositories the views need and owns commit / rollback, so a
view can commit each mutation on its own and recover the session after a
failed call.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from .repositories import (
    DriverRepository,
    ProfileRepository,
    RideRepository,
    WalletRepository,
    WithdrawalRepository,
)


class DataStore:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.profiles = ProfileRepository(session)
        self.drivers = DriverRepository(session)
        self.rides = RideRepository(session)
        self.wallets = WalletRepository(session)
        self.withdrawals = WithdrawalRepository(session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
