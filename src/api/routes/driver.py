"""
Driver endpoints
================

GET   /api/v1/driver/dashboard              -- driver row, wallet, rides, withdrawals
POST  /api/v1/driver/registration           -- register vehicle and licence
POST  /api/v1/driver/availability           -- toggle online / offline
POST  /api/v1/driver/withdrawals            -- request payout of the whole balance
PATCH /api/v1/driver/rides/{ride_id}/status -- accept / start / complete / cancel
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_store, require_user
from src.api.middleware import limiter
from src.api.schemas import (
    DriverDashboardResponse,
    DriverRegistrationRequest,
    RideStatusUpdateRequest,
)
from src.config import settings
from src.domain.session import Session
from src.infrastructure.store import DataStore
from src.views.driver import (
    DriverRegistration,
    load_driver_dashboard,
    register_driver,
    request_withdrawal,
    toggle_availability,
    update_ride_status,
)

router = APIRouter(prefix="/driver", tags=["driver"])


@router.get(
    "/dashboard",
    response_model=DriverDashboardResponse,
    summary="Driver dashboard",
    description="An unregistered caller gets ``registered: false``, not an error.",
)
@limiter.limit(settings.rate_limit)
async def dashboard(
    request: Request,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    state = await load_driver_dashboard(store, session.user_id)
    return DriverDashboardResponse.model_validate(state)


@router.post(
    "/registration",
    response_model=DriverDashboardResponse,
    summary="Submit driver registration for admin review",
)
@limiter.limit(settings.rate_limit)
async def registration(
    request: Request,
    body: DriverRegistrationRequest,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    state = await load_driver_dashboard(store, session.user_id)
    state = await register_driver(
        store, state, session.user_id, DriverRegistration(**body.model_dump())
    )
    return DriverDashboardResponse.model_validate(state)


@router.post(
    "/availability",
    response_model=DriverDashboardResponse,
    summary="Toggle online / offline",
)
@limiter.limit(settings.rate_limit)
async def availability(
    request: Request,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    state = await load_driver_dashboard(store, session.user_id)
    state = await toggle_availability(store, state, session.user_id)
    return DriverDashboardResponse.model_validate(state)


@router.post(
    "/withdrawals",
    response_model=DriverDashboardResponse,
    summary="Request withdrawal of the wallet balance",
)
@limiter.limit(settings.rate_limit)
async def withdrawals(
    request: Request,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    state = await load_driver_dashboard(store, session.user_id)
    state = await request_withdrawal(store, state, session.user_id)
    return DriverDashboardResponse.model_validate(state)


@router.patch(
    "/rides/{ride_id}/status",
    response_model=DriverDashboardResponse,
    summary="Move a ride along its lifecycle",
    description=(
        "requested -> accepted -> in_progress -> completed, or cancelled from "
        "any non-terminal status.  Only approved drivers may accept."
    ),
)
@limiter.limit(settings.rate_limit)
async def ride_status(
    request: Request,
    ride_id: str,
    body: RideStatusUpdateRequest,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    state = await load_driver_dashboard(store, session.user_id)
    state = await update_ride_status(
        store, state, session.user_id, ride_id, body.status
    )
    return DriverDashboardResponse.model_validate(state)
