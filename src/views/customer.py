"""Customer trips: booking from a ride selection, history, cancellation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.domain.entities import InvalidStateTransition, Ride, utcnow
from src.domain.enums import RideStatus
from src.domain.ride_selection import RideSelection
from src.infrastructure.store import DataStore
from src.views.common import Notice, fetch_or_keep

logger = logging.getLogger(__name__)


@dataclass
class TripHistory:
    rides: list[Ride] = field(default_factory=list)
    notice: Optional[Notice] = None

    @property
    def active_ride(self) -> Optional[Ride]:
        return next((r for r in self.rides if not r.is_terminal), None)


async def load_trip_history(store: DataStore, customer_id: str) -> TripHistory:
    rides = await fetch_or_keep(
        store, lambda: store.rides.list_for_customer(customer_id), [], "trip history"
    )
    return TripHistory(rides=rides)


async def _refresh(store: DataStore, history: TripHistory, customer_id: str) -> list[Ride]:
    return await fetch_or_keep(
        store,
        lambda: store.rides.list_for_customer(customer_id),
        history.rides,
        "trip history",
    )


async def book_ride(
    store: DataStore,
    history: TripHistory,
    customer_id: str,
    selection: RideSelection,
) -> TripHistory:
    """Insert a ``requested`` ride for the selected catalog option.

    The estimated fare is the option's flat price.
    """
    if not selection.can_offer_rides():
        return replace(
            history, notice=Notice.error("Enter pickup and drop-off locations")
        )
    option = selection.selected_option()
    if option is None:
        return replace(history, notice=Notice.error("Choose a ride first"))

    try:
        ride = await store.rides.create(
            customer_id=customer_id,
            pickup_location=selection.pickup,
            dropoff_location=selection.dropoff,
            vehicle_type=option.vehicle_type,
            status=RideStatus.REQUESTED,
            estimated_fare=option.price,
            requested_at=utcnow(),
        )
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to book %s for %s", option.id, customer_id)
        await store.rollback()
        return replace(history, notice=Notice.error("Failed to book ride"))

    logger.info("Ride %s requested: customer=%s option=%s", ride.id, customer_id, option.id)
    return replace(
        history,
        rides=await _refresh(store, history, customer_id),
        notice=Notice.success(f"{option.name} requested"),
    )


async def cancel_ride(
    store: DataStore, history: TripHistory, customer_id: str, ride_id: str
) -> TripHistory:
    ride = await fetch_or_keep(store, lambda: store.rides.get_by_id(ride_id), None, "ride")
    if ride is None or ride.customer_id != customer_id:
        return replace(history, notice=Notice.error("Ride not found"))

    try:
        column = ride.transition_to(RideStatus.CANCELLED)
    except InvalidStateTransition as exc:
        return replace(history, notice=Notice.error(str(exc)))

    try:
        await store.rides.update(ride_id, status=ride.status, **{column: getattr(ride, column)})
        await store.commit()
    except SQLAlchemyError:
        logger.exception("Failed to cancel ride %s", ride_id)
        await store.rollback()
        return replace(history, notice=Notice.error("Failed to cancel ride"))

    return replace(
        history,
        rides=await _refresh(store, history, customer_id),
        notice=Notice.success("Ride cancelled"),
    )
