"""Geofence evaluation.

Pure functions: no I/O, no clock. Distances use the haversine formula on a
spherical earth which is accurate to well under a meter at office-radius
scales.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import OutOfRangeError
from ..locations.model import Location, LocationWifi
from .model import Coordinate, LocationMatch


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two points, in meters."""

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance_to(point: Coordinate, location: Location) -> float:
    return haversine_distance(point, Coordinate(location.latitude, location.longitude))


def find_containing_location(point: Coordinate, locations: Iterable[Location]) -> LocationMatch:
    """Return the location whose geofence contains ``point``.

    When several geofences overlap the winner is the smallest radius, then
    the nearest centre, then the lowest id, so the answer never depends on
    the order rows came back from the database.
    """

    candidates: list[LocationMatch] = []
    for location in locations:
        distance = distance_to(point, location)
        if distance <= location.radius_meter:
            candidates.append(LocationMatch(location=location, distance_meters=distance))

    if not candidates:
        raise OutOfRangeError("You are not within any allowed location")

    return min(
        candidates,
        key=lambda m: (m.location.radius_meter, m.distance_meters, m.location.location_id),
    )


def match_wifi(
    location: Location,
    *,
    ssid: Optional[str] = None,
    mac_address: Optional[str] = None,
) -> Optional[LocationWifi]:
    """Find the registered access point the device reported, if any."""

    if not ssid and not mac_address:
        return None

    mac = mac_address.strip().upper() if mac_address else None
    for wifi in location.wifi:
        if mac and wifi.mac_address.upper() == mac:
            return wifi
    for wifi in location.wifi:
        if ssid and wifi.ssid_name == ssid:
            return wifi
    return None


def evaluate_position(
    point: Coordinate,
    locations: Iterable[Location],
    *,
    wifi_ssid: Optional[str] = None,
    wifi_mac: Optional[str] = None,
) -> LocationMatch:
    match = find_containing_location(point, locations)
    wifi = match_wifi(match.location, ssid=wifi_ssid, mac_address=wifi_mac)
    if wifi is None:
        return match
    return LocationMatch(location=match.location, distance_meters=match.distance_meters, wifi=wifi)
