from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class LocationWifi:
    wifi_id: int
    location_id: int
    ssid_name: str
    mac_address: str


@dataclass(frozen=True)
class Location:
    """Office geofence: a centre point and an accepted radius in meters."""

    location_id: int
    company_id: int
    name: str
    latitude: float
    longitude: float
    radius_meter: float
    wifi: tuple[LocationWifi, ...] = field(default_factory=tuple)
    company_name: Optional[str] = None
