"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 1 admin, 4 customers and 4 driver profiles
  - 4 driver registrations (2 approved, 1 pending, 1 rejected) with wallets
  - 6 sample rides (mix of requested, accepted, in_progress, completed, cancelled)
  - 2 withdrawal requests (1 pending, 1 approved)

Identity ids are fixed so they can be sent as the ``X-User-Id`` header.
"""

import asyncio
from datetime import timedelta

from sqlalchemy import text

from src.domain.entities import utcnow
from src.domain.enums import (
    DriverStatus,
    RideStatus,
    UserRole,
    VehicleType,
    WithdrawalStatus,
)
from src.infrastructure.database import async_session_factory, engine
from src.infrastructure.models import (
    DriverModel,
    ProfileModel,
    RideModel,
    WalletModel,
    WithdrawalModel,
)


PROFILES = [
    {"user_id": "admin-0001", "full_name": "Nisha Kapoor", "email": "nisha@bhagao.example", "role": UserRole.ADMIN},
    {"user_id": "cust-0001", "full_name": "Aarav Sharma", "email": "aarav@example.com", "role": UserRole.CUSTOMER},
    {"user_id": "cust-0002", "full_name": "Priya Patel", "email": "priya@example.com", "role": UserRole.CUSTOMER},
    {"user_id": "cust-0003", "full_name": "Rohan Mehta", "email": "rohan@example.com", "role": UserRole.CUSTOMER},
    {"user_id": "cust-0004", "full_name": "Sneha Gupta", "email": "sneha@example.com", "role": UserRole.CUSTOMER},
    {"user_id": "drv-0001", "full_name": "Vikram Singh", "email": "vikram@example.com", "role": UserRole.DRIVER},
    {"user_id": "drv-0002", "full_name": "Ananya Reddy", "email": "ananya@example.com", "role": UserRole.DRIVER},
    {"user_id": "drv-0003", "full_name": "Karan Joshi", "email": "karan@example.com", "role": UserRole.DRIVER},
    {"user_id": "drv-0004", "full_name": "Meera Nair", "email": "meera@example.com", "role": UserRole.DRIVER},
]

DRIVERS = [
    {"user_id": "drv-0001", "vehicle_type": VehicleType.SEDAN, "vehicle_model": "Maruti Dzire", "vehicle_plate": "MH01AB1234", "status": DriverStatus.APPROVED, "is_available": True, "rating": 4.8, "balance": 1450.0},
    {"user_id": "drv-0002", "vehicle_type": VehicleType.MINI, "vehicle_model": "Hyundai i10", "vehicle_plate": "MH02CD5678", "status": DriverStatus.APPROVED, "is_available": False, "rating": 4.6, "balance": 0.0},
    {"user_id": "drv-0003", "vehicle_type": VehicleType.SUV, "vehicle_model": "Toyota Innova", "vehicle_plate": "MH03EF9012", "status": DriverStatus.PENDING, "is_available": False, "rating": None, "balance": 0.0},
    {"user_id": "drv-0004", "vehicle_type": VehicleType.MINI, "vehicle_model": "Tata Tiago", "vehicle_plate": "MH04GH3456", "status": DriverStatus.REJECTED, "is_available": False, "rating": None, "balance": 0.0},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM profiles"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Profiles ──────────────────────────────────────────────────
        for p in PROFILES:
            session.add(ProfileModel(**p))
        await session.flush()
        print(f"  Created {len(PROFILES)} profiles")

        # ── Drivers + wallets ─────────────────────────────────────────
        wallets = {}
        for i, d in enumerate(DRIVERS, start=1):
            session.add(
                DriverModel(
                    user_id=d["user_id"],
                    vehicle_type=d["vehicle_type"],
                    vehicle_model=d["vehicle_model"],
                    vehicle_plate=d["vehicle_plate"],
                    license_number=f"DL-{i:04d}-2020",
                    rc_number=f"RC-{i:04d}",
                    status=d["status"],
                    is_available=d["is_available"],
                    rating=d["rating"],
                )
            )
            wallet = WalletModel(
                driver_id=d["user_id"],
                balance=d["balance"],
                total_earned=d["balance"],
            )
            session.add(wallet)
            wallets[d["user_id"]] = wallet
        await session.flush()
        print(f"  Created {len(DRIVERS)} drivers with wallets")

        # ── Rides ─────────────────────────────────────────────────────
        now = utcnow()
        rides_data = [
            {"customer_id": "cust-0001", "driver_id": None, "pickup": "Mumbai Airport T2", "dropoff": "Andheri West", "vehicle_type": VehicleType.SEDAN, "status": RideStatus.REQUESTED, "fare": 180.0},
            {"customer_id": "cust-0002", "driver_id": "drv-0001", "pickup": "Bandra Station", "dropoff": "Powai Lake", "vehicle_type": VehicleType.SEDAN, "status": RideStatus.ACCEPTED, "fare": 180.0},
            {"customer_id": "cust-0003", "driver_id": "drv-0002", "pickup": "Dadar", "dropoff": "Worli Sea Face", "vehicle_type": VehicleType.MINI, "status": RideStatus.IN_PROGRESS, "fare": 120.0},
            {"customer_id": "cust-0004", "driver_id": "drv-0001", "pickup": "Juhu Beach", "dropoff": "BKC", "vehicle_type": VehicleType.SEDAN, "status": RideStatus.COMPLETED, "fare": 180.0},
            {"customer_id": "cust-0001", "driver_id": "drv-0002", "pickup": "Colaba", "dropoff": "Churchgate", "vehicle_type": VehicleType.MINI, "status": RideStatus.COMPLETED, "fare": 120.0},
            {"customer_id": "cust-0002", "driver_id": None, "pickup": "Thane", "dropoff": "Vashi", "vehicle_type": VehicleType.SUV, "status": RideStatus.CANCELLED, "fare": 250.0},
        ]
        # Timestamps reached on the way to each status
        path = {
            RideStatus.REQUESTED: ["requested_at"],
            RideStatus.ACCEPTED: ["requested_at", "accepted_at"],
            RideStatus.IN_PROGRESS: ["requested_at", "accepted_at", "started_at"],
            RideStatus.COMPLETED: ["requested_at", "accepted_at", "started_at", "completed_at"],
            RideStatus.CANCELLED: ["requested_at", "cancelled_at"],
        }
        for i, r in enumerate(rides_data):
            created = now - timedelta(hours=len(rides_data) - i)
            stamps = {
                column: created + timedelta(minutes=5 * step)
                for step, column in enumerate(path[r["status"]])
            }
            session.add(
                RideModel(
                    customer_id=r["customer_id"],
                    driver_id=r["driver_id"],
                    pickup_location=r["pickup"],
                    dropoff_location=r["dropoff"],
                    vehicle_type=r["vehicle_type"],
                    status=r["status"],
                    estimated_fare=r["fare"],
                    final_fare=r["fare"] if r["status"] == RideStatus.COMPLETED else None,
                    created_at=created,
                    **stamps,
                )
            )
        await session.flush()
        print(f"  Created {len(rides_data)} rides")

        # ── Withdrawals ───────────────────────────────────────────────
        session.add_all(
            [
                WithdrawalModel(
                    driver_id="drv-0001",
                    wallet_id=wallets["drv-0001"].id,
                    amount=1450.0,
                    status=WithdrawalStatus.PENDING,
                ),
                WithdrawalModel(
                    driver_id="drv-0002",
                    wallet_id=wallets["drv-0002"].id,
                    amount=600.0,
                    status=WithdrawalStatus.APPROVED,
                    processed_at=now - timedelta(days=1),
                ),
            ]
        )
        await session.flush()
        print("  Created 2 withdrawals")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
