"""Great-circle distance between airports using the haversine formula."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum

from app.schemas.airport import Airport


class DistanceUnit(StrEnum):
    MILES = "mi"
    KILOMETERS = "km"


EARTH_RADIUS = {
    DistanceUnit.MILES: 3959.0,
    DistanceUnit.KILOMETERS: 6371.0,
}


@dataclass(frozen=True, slots=True)
class DistanceResult:
    origin: Airport
    destination: Airport
    distance: float
    unit: DistanceUnit


def distance(origin: Airport, destination: Airport, unit: DistanceUnit) -> float:
    """Return the great-circle distance between two airports in ``unit``.

    Coordinates must already be validated; the result is non-negative and
    symmetric in its two airports.
    """
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(destination.latitude)
    delta_lat = math.radians(destination.latitude - origin.latitude)
    delta_lon = math.radians(destination.longitude - origin.longitude)

    hav = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push hav a hair outside [0, 1] for (near-)antipodal points
    hav = min(max(hav, 0.0), 1.0)
    central_angle = 2 * math.atan2(math.sqrt(hav), math.sqrt(1 - hav))

    return EARTH_RADIUS[unit] * central_angle


def measure(origin: Airport, destination: Airport, unit: DistanceUnit) -> DistanceResult:
    return DistanceResult(
        origin=origin,
        destination=destination,
        distance=distance(origin, destination, unit),
        unit=unit,
    )


class DistanceCalculator:
    """Calculate great-circle distances between airports."""

    def miles(self, origin: Airport, destination: Airport) -> float:
        return distance(origin, destination, DistanceUnit.MILES)

    def kilometers(self, origin: Airport, destination: Airport) -> float:
        return distance(origin, destination, DistanceUnit.KILOMETERS)


__all__ = ["DistanceCalculator", "DistanceResult", "DistanceUnit", "EARTH_RADIUS", "distance", "measure"]
