"""
Ride-selection view model.

Given the pickup / dropoff text typed by the customer and a static catalog
of ride options, decides whether the catalog is offered and tracks at most
one selected option.

Prices and durations are per-option constants.  Nothing here looks at the
distance between the two locations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .entities import Location
from .enums import VehicleType

logger = logging.getLogger(__name__)

CURRENT_LOCATION_LABEL = "Current Location"


class UnknownRideOption(ValueError):
    """Raised when selecting an id that is not in the catalog."""


class GeolocationError(Exception):
    """The device could not (or would not) report a position."""


class Geolocator(Protocol):
    def current_position(self) -> Location: ...


@dataclass(frozen=True)
class RideOption:
    id: str
    name: str
    vehicle_type: VehicleType
    duration: str
    price: float
    rating: float
    capacity: int


RIDE_CATALOG: tuple[RideOption, ...] = (
    RideOption("bhagao-mini", "Bhagao Mini", VehicleType.MINI, "3 min", 120.0, 4.8, 4),
    RideOption("bhagao-sedan", "Bhagao Sedan", VehicleType.SEDAN, "2 min", 180.0, 4.9, 4),
    RideOption("bhagao-suv", "Bhagao SUV", VehicleType.SUV, "5 min", 250.0, 4.7, 6),
)


@dataclass
class RideSelection:
    pickup: str = ""
    dropoff: str = ""
    selected: Optional[str] = None
    catalog: tuple[RideOption, ...] = field(default=RIDE_CATALOG, repr=False)

    def set_pickup(self, text: str) -> None:
        self.pickup = text

    def set_dropoff(self, text: str) -> None:
        self.dropoff = text

    def can_offer_rides(self) -> bool:
        return bool(self.pickup) and bool(self.dropoff)

    def offered_options(self) -> tuple[RideOption, ...]:
        return self.catalog if self.can_offer_rides() else ()

    def select(self, option_id: str) -> None:
        if all(option.id != option_id for option in self.catalog):
            raise UnknownRideOption(f"Unknown ride option: {option_id}")
        self.selected = option_id

    def selected_option(self) -> Optional[RideOption]:
        for option in self.catalog:
            if option.id == self.selected:
                return option
        return None

    def use_current_location(
        self,
        geolocator: Optional[Geolocator],
        label: str = CURRENT_LOCATION_LABEL,
    ) -> bool:
        """Fill pickup with *label* if the device reports a position.

        The reported coordinates are discarded.  Returns whether pickup
        changed.
        """
        if geolocator is None:
            return False
        try:
            geolocator.current_position()
        except GeolocationError as exc:
            logger.error("Error getting location: %s", exc)
            return False
        self.pickup = label
        return True
