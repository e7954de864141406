from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..locations.model import Location, LocationWifi


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocationMatch:
    location: Location
    distance_meters: float
    wifi: Optional[LocationWifi] = None
