"""
Customer endpoints
==================

POST  /api/v1/customer/ride-options           -- evaluate pickup / dropoff / selection
POST  /api/v1/customer/current-location       -- fill pickup from the device position
POST  /api/v1/customer/rides                  -- book the selected option
GET   /api/v1/customer/rides                  -- trip history
GET   /api/v1/customer/rides/{ride_id}        -- one of the caller's rides
PATCH /api/v1/customer/rides/{ride_id}/cancel -- cancel one of the caller's rides
"""

from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.dependencies import get_store, require_user
from src.api.middleware import limiter
from src.api.schemas import (
    CurrentLocationRequest,
    ErrorResponse,
    NoticeResponse,
    RideBookingRequest,
    RideOptionResponse,
    RideResponse,
    RideSelectionRequest,
    RideSelectionResponse,
    TripHistoryResponse,
)
from src.config import settings
from src.domain.entities import Location
from src.domain.ride_selection import GeolocationError, RideSelection, UnknownRideOption
from src.domain.session import Session
from src.infrastructure.store import DataStore
from src.views.common import Notice
from src.views.customer import book_ride, cancel_ride, load_trip_history

router = APIRouter(prefix="/customer", tags=["customer"])


class ReportedPosition:
    """Geolocator backed by the position the client's device reported."""

    def __init__(self, report: CurrentLocationRequest):
        self.report = report

    def current_position(self) -> Location:
        report = self.report
        if report.error or report.latitude is None or report.longitude is None:
            raise GeolocationError(report.error or "position unavailable")
        return Location(report.latitude, report.longitude)


def _selection_response(
    selection: RideSelection, notice: Optional[Notice] = None
) -> RideSelectionResponse:
    return RideSelectionResponse(
        pickup=selection.pickup,
        dropoff=selection.dropoff,
        can_offer_rides=selection.can_offer_rides(),
        options=[
            RideOptionResponse.model_validate(o) for o in selection.offered_options()
        ],
        selected_option_id=selection.selected,
        notice=NoticeResponse.model_validate(notice) if notice else None,
    )


def _build_selection(body: RideSelectionRequest) -> tuple[RideSelection, Optional[Notice]]:
    selection = RideSelection()
    selection.set_pickup(body.pickup)
    selection.set_dropoff(body.dropoff)
    if body.selected_option_id is not None:
        try:
            selection.select(body.selected_option_id)
        except UnknownRideOption as exc:
            return selection, Notice.error(str(exc))
    return selection, None


@router.post(
    "/ride-options",
    response_model=RideSelectionResponse,
    summary="Offer ride options for a pickup / dropoff pair",
)
@limiter.limit(settings.rate_limit)
async def ride_options(
    request: Request,
    body: RideSelectionRequest,
    session: Session = Depends(require_user),
):
    return _selection_response(*_build_selection(body))


@router.post(
    "/current-location",
    response_model=RideSelectionResponse,
    summary="Use the device position as pickup",
    description=(
        "Sets pickup to a fixed label when the device reported a position. "
        "The coordinates themselves are not used."
    ),
)
@limiter.limit(settings.rate_limit)
async def current_location(
    request: Request,
    body: CurrentLocationRequest,
    session: Session = Depends(require_user),
):
    selection, notice = _build_selection(body)
    selection.use_current_location(
        ReportedPosition(body), label=settings.current_location_label
    )
    return _selection_response(selection, notice)


@router.post(
    "/rides",
    response_model=TripHistoryResponse,
    summary="Book the selected ride option",
)
@limiter.limit(settings.rate_limit)
async def create_ride(
    request: Request,
    body: RideBookingRequest,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    history = await load_trip_history(store, session.user_id)
    selection, notice = _build_selection(
        RideSelectionRequest(
            pickup=body.pickup, dropoff=body.dropoff, selected_option_id=body.option_id
        )
    )
    if notice is not None:
        history = replace(history, notice=notice)
    else:
        history = await book_ride(store, history, session.user_id, selection)
    return TripHistoryResponse.model_validate(history)


@router.get(
    "/rides",
    response_model=TripHistoryResponse,
    summary="Trip history, newest first",
)
@limiter.limit(settings.rate_limit)
async def list_rides(
    request: Request,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    return TripHistoryResponse.model_validate(
        await load_trip_history(store, session.user_id)
    )


@router.get(
    "/rides/{ride_id}",
    response_model=RideResponse,
    summary="Get one of the caller's rides",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_ride(
    request: Request,
    ride_id: str,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    ride = await store.rides.get_by_id(ride_id)
    if not ride or ride.customer_id != session.user_id:
        raise HTTPException(status_code=404, detail="Ride not found")
    return RideResponse.model_validate(ride)


@router.patch(
    "/rides/{ride_id}/cancel",
    response_model=TripHistoryResponse,
    summary="Cancel a ride",
    description="Any non-terminal ride of the caller can be cancelled.",
)
@limiter.limit(settings.rate_limit)
async def cancel(
    request: Request,
    ride_id: str,
    session: Session = Depends(require_user),
    store: DataStore = Depends(get_store),
):
    history = await load_trip_history(store, session.user_id)
    history = await cancel_ride(store, history, session.user_id, ride_id)
    return TripHistoryResponse.model_validate(history)
