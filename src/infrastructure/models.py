"""
SQLAlchemy ORM models (maps to PostgreSQL).

Tables
------
* ``profiles``            -- identity record per authenticated user, with role
* ``drivers``             -- vehicle / licence registration of a driver profile
* ``rides``               -- trip requests and their lifecycle timestamps
* ``wallets``             -- one running balance per driver
* ``wallet_transactions`` -- append-only ledger (schema only)
* ``withdrawals``         -- driver requests to pay out the wallet balance

Every ``driver_id`` / ``customer_id`` column holds the identity ``user_id``
of the profile, not ``profiles.id``.  Attribute names match the fields of
the dataclasses in ``src.domain.entities`` one to one.

Indexes
-------
* **B-Tree** on ``status`` columns and on the ``user_id`` / ``driver_id``
  look-up columns used by the role views.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)

from .database import Base
from src.domain.enums import (
    DriverStatus,
    RideStatus,
    UserRole,
    VehicleType,
    WithdrawalStatus,
)


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum(enum_cls, name: str) -> Enum:
    """Persist the lowercase literal (``"pending"``), not the member name."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
    )


class ProfileModel(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), unique=True, nullable=False)
    full_name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    avatar_url = Column(Text, nullable=True)
    role = Column(_enum(UserRole, "user_role"), default=UserRole.CUSTOMER, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (Index("idx_profiles_role", "role"),)


class DriverModel(Base):
    __tablename__ = "drivers"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=False)
    vehicle_type = Column(_enum(VehicleType, "vehicle_type"), nullable=False)
    vehicle_model = Column(String(120), nullable=False)
    vehicle_plate = Column(String(32), nullable=False)
    license_number = Column(String(64), nullable=False)
    rc_number = Column(String(64), nullable=False)
    license_document_url = Column(Text, nullable=True)
    rc_document_url = Column(Text, nullable=True)
    vehicle_photo_url = Column(Text, nullable=True)
    status = Column(
        _enum(DriverStatus, "driver_status"), default=DriverStatus.PENDING, nullable=False
    )
    is_available = Column(Boolean, default=False, nullable=False)
    rating = Column(Float, nullable=True)
    total_rides = Column(Integer, default=0)
    current_location = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_drivers_user", "user_id"),
        Index("idx_drivers_status", "status"),
        Index("idx_drivers_available", "is_available"),
    )


class RideModel(Base):
    __tablename__ = "rides"

    id = Column(String(36), primary_key=True, default=_uuid)
    customer_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=False)
    driver_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=True)

    pickup_location = Column(Text, nullable=False)
    dropoff_location = Column(Text, nullable=False)
    pickup_coordinates = Column(Text, nullable=True)
    dropoff_coordinates = Column(Text, nullable=True)
    distance_km = Column(Float, nullable=True)

    vehicle_type = Column(_enum(VehicleType, "vehicle_type"), nullable=False)
    status = Column(
        _enum(RideStatus, "ride_status"), default=RideStatus.REQUESTED, nullable=False
    )
    estimated_fare = Column(Float, nullable=True)
    final_fare = Column(Float, nullable=True)
    customer_rating = Column(Float, nullable=True)
    driver_rating = Column(Float, nullable=True)

    requested_at = Column(DateTime(timezone=True), default=_utcnow)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_rides_status", "status"),
        Index("idx_rides_customer", "customer_id"),
        Index("idx_rides_driver", "driver_id"),
    )


class WalletModel(Base):
    __tablename__ = "wallets"

    id = Column(String(36), primary_key=True, default=_uuid)
    driver_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=False)
    balance = Column(Float, default=0.0, nullable=False)
    total_earned = Column(Float, default=0.0, nullable=False)
    total_withdrawn = Column(Float, default=0.0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (Index("idx_wallets_driver", "driver_id"),)


class WalletTransactionModel(Base):
    __tablename__ = "wallet_transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    wallet_id = Column(String(36), ForeignKey("wallets.id"), nullable=False)
    ride_id = Column(String(36), ForeignKey("rides.id"), nullable=True)
    amount = Column(Float, nullable=False)
    type = Column(String(32), nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (Index("idx_wallet_transactions_wallet", "wallet_id"),)


class WithdrawalModel(Base):
    __tablename__ = "withdrawals"

    id = Column(String(36), primary_key=True, default=_uuid)
    driver_id = Column(String(36), ForeignKey("profiles.user_id"), nullable=False)
    wallet_id = Column(String(36), ForeignKey("wallets.id"), nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(
        _enum(WithdrawalStatus, "withdrawal_status"),
        default=WithdrawalStatus.PENDING,
        nullable=False,
    )
    bank_account_number = Column(String(34), nullable=True)
    bank_ifsc = Column(String(11), nullable=True)
    notes = Column(Text, nullable=True)
    requested_at = Column(DateTime(timezone=True), default=_utcnow)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_withdrawals_driver", "driver_id"),
        Index("idx_withdrawals_status", "status"),
    )
