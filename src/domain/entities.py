"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Ride``: enforces valid lifecycle transitions
  (REQUESTED -> ACCEPTED -> IN_PROGRESS -> COMPLETED, or CANCELLED from any
  non-terminal state) and stamps the matching timestamp column.
- ``Wallet.is_consistent`` reports drift between the balance and the
  earned/withdrawn totals and is exposed on wallet responses.  Nothing
  enforces the identity on write.

Rows coming out of the store are converted into these dataclasses once,
inside the repositories; views never see ORM objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .enums import (
    DriverStatus,
    RIDE_STATUS_TIMESTAMPS,
    RIDE_TRANSITIONS,
    RideStatus,
    UserRole,
    VehicleType,
    WithdrawalStatus,
)


class InvalidStateTransition(Exception):
    """Raised when a ride status change violates the state machine."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Profile:
    id: Optional[str] = None
    user_id: str = ""
    full_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Driver:
    id: Optional[str] = None
    user_id: str = ""
    vehicle_type: VehicleType = VehicleType.MINI
    vehicle_model: str = ""
    vehicle_plate: str = ""
    license_number: str = ""
    rc_number: str = ""
    license_document_url: Optional[str] = None
    rc_document_url: Optional[str] = None
    vehicle_photo_url: Optional[str] = None
    status: DriverStatus = DriverStatus.PENDING
    is_available: bool = False
    rating: Optional[float] = None
    total_rides: int = 0
    current_location: Optional[str] = None  # opaque, never interpreted
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def can_take_rides(self) -> bool:
        return self.status == DriverStatus.APPROVED


@dataclass
class Ride:
    id: Optional[str] = None
    customer_id: str = ""
    driver_id: Optional[str] = None
    pickup_location: str = ""
    dropoff_location: str = ""
    pickup_coordinates: Optional[str] = None
    dropoff_coordinates: Optional[str] = None
    distance_km: Optional[float] = None
    vehicle_type: VehicleType = VehicleType.MINI
    status: RideStatus = RideStatus.REQUESTED
    estimated_fare: Optional[float] = None
    final_fare: Optional[float] = None
    customer_rating: Optional[float] = None
    driver_rating: Optional[float] = None
    requested_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return not RIDE_TRANSITIONS.get(self.status, set())

    def transition_to(
        self, new_status: RideStatus, at: Optional[datetime] = None
    ) -> str:
        """Move to *new_status* if the transition is legal, else raise.

        Stamps the timestamp column belonging to *new_status* and returns
        its name so callers can persist exactly the columns that changed.
        """
        allowed = RIDE_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        column = RIDE_STATUS_TIMESTAMPS[new_status]
        setattr(self, column, at or utcnow())
        self.status = new_status
        return column


@dataclass
class Wallet:
    id: Optional[str] = None
    driver_id: str = ""
    balance: float = 0.0
    total_earned: float = 0.0
    total_withdrawn: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def can_withdraw(self) -> bool:
        return self.balance > 0

    @property
    def is_consistent(self) -> bool:
        """True when balance == total_earned - total_withdrawn (to the paisa)."""
        return abs(self.balance - (self.total_earned - self.total_withdrawn)) < 0.005


@dataclass
class WithdrawalRequest:
    id: Optional[str] = None
    driver_id: str = ""
    wallet_id: str = ""
    amount: float = 0.0
    status: WithdrawalStatus = WithdrawalStatus.PENDING
    bank_account_number: Optional[str] = None
    bank_ifsc: Optional[str] = None
    notes: Optional[str] = None
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
