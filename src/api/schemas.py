"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.domain.enums import (
    DriverStatus,
    RideStatus,
    UserRole,
    VehicleType,
    WithdrawalStatus,
)
from src.domain.session import ViewName


# ── Requests ──────────────────────────────────────────────────────────


class RideSelectionRequest(BaseModel):
    pickup: str = ""
    dropoff: str = ""
    selected_option_id: Optional[str] = None


class CurrentLocationRequest(RideSelectionRequest):
    """Outcome of the device's one-shot geolocation query."""

    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    error: Optional[str] = Field(
        None, description="Set by the client when the device refused or failed."
    )


class RideBookingRequest(BaseModel):
    pickup: str
    dropoff: str
    option_id: str


class DriverRegistrationRequest(BaseModel):
    vehicle_type: VehicleType
    vehicle_model: str = Field(..., min_length=1, max_length=120)
    vehicle_plate: str = Field(..., min_length=1, max_length=32)
    license_number: str = Field(..., min_length=1, max_length=64)
    rc_number: str = Field(..., min_length=1, max_length=64)
    license_document_url: Optional[str] = None
    rc_document_url: Optional[str] = None
    vehicle_photo_url: Optional[str] = None


class RideStatusUpdateRequest(BaseModel):
    status: RideStatus


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone: Optional[str] = Field(None, max_length=32)

    @field_validator("full_name")
    @classmethod
    def full_name_not_null(cls, value: Optional[str]) -> str:
        # omitted is fine, explicit null is not
        if value is None:
            raise ValueError("full_name cannot be null")
        return value


# ── Responses ─────────────────────────────────────────────────────────


class _FromAttributes(BaseModel):
    model_config = {"from_attributes": True}


class NoticeResponse(_FromAttributes):
    level: str
    message: str


class ProfileResponse(_FromAttributes):
    id: str
    user_id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None


class DriverResponse(_FromAttributes):
    id: str
    user_id: str
    vehicle_type: VehicleType
    vehicle_model: str
    vehicle_plate: str
    license_number: str
    rc_number: str
    status: DriverStatus
    is_available: bool
    rating: Optional[float] = None
    total_rides: Optional[int] = None
    created_at: Optional[datetime] = None


class RideResponse(_FromAttributes):
    id: str
    customer_id: str
    driver_id: Optional[str] = None
    pickup_location: str
    dropoff_location: str
    distance_km: Optional[float] = None
    vehicle_type: VehicleType
    status: RideStatus
    estimated_fare: Optional[float] = None
    final_fare: Optional[float] = None
    requested_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class WalletResponse(_FromAttributes):
    id: str
    driver_id: str
    balance: float
    total_earned: float
    total_withdrawn: float
    is_consistent: bool


class WithdrawalResponse(_FromAttributes):
    id: str
    driver_id: str
    wallet_id: str
    amount: float
    status: WithdrawalStatus
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class RideOptionResponse(_FromAttributes):
    id: str
    name: str
    vehicle_type: VehicleType
    duration: str
    price: float
    rating: float
    capacity: int


class RideSelectionResponse(BaseModel):
    pickup: str
    dropoff: str
    can_offer_rides: bool
    options: list[RideOptionResponse] = []
    selected_option_id: Optional[str] = None
    notice: Optional[NoticeResponse] = None


class TripHistoryResponse(_FromAttributes):
    rides: list[RideResponse] = []
    active_ride: Optional[RideResponse] = None
    notice: Optional[NoticeResponse] = None


class DriverDashboardResponse(_FromAttributes):
    registered: bool
    driver: Optional[DriverResponse] = None
    wallet: Optional[WalletResponse] = None
    is_available: bool
    can_withdraw: bool
    rides: list[RideResponse] = []
    withdrawals: list[WithdrawalResponse] = []
    open_requests: list[RideResponse] = []
    notice: Optional[NoticeResponse] = None


class AdminStatsResponse(_FromAttributes):
    total_rides: int
    active_drivers: int
    pending_approvals: int
    total_earnings: float


class DriverListingResponse(_FromAttributes):
    driver: DriverResponse
    full_name: Optional[str] = None
    email: Optional[str] = None
    can_review: bool


class WithdrawalListingResponse(_FromAttributes):
    withdrawal: WithdrawalResponse
    full_name: Optional[str] = None
    email: Optional[str] = None
    can_review: bool


class AdminConsoleResponse(_FromAttributes):
    stats: AdminStatsResponse
    drivers: list[DriverListingResponse] = []
    rides: list[RideResponse] = []
    withdrawals: list[WithdrawalListingResponse] = []
    notice: Optional[NoticeResponse] = None


class AccountResponse(_FromAttributes):
    view: ViewName
    profile: Optional[ProfileResponse] = None
    notice: Optional[NoticeResponse] = None


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
