from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.validators import (
    require_latitude,
    require_longitude,
    require_mac_address,
    require_non_empty,
    require_positive_id,
    require_radius,
)
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Location, LocationWifi
from .repository import LocationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationInput:
    name: str
    latitude: float
    longitude: float
    radius_meter: float
    company_id: Optional[int] = None

    @classmethod
    def parse(cls, data: dict[str, Any], *, is_update: bool) -> "LocationInput":
        name = require_non_empty(data.get("name"), "Location name")

        company_id = None
        if not is_update:
            company_id = require_positive_id(data.get("company_id"), "Company")

        return cls(
            name=name,
            latitude=require_latitude(data.get("latitude")),
            longitude=require_longitude(data.get("longitude")),
            radius_meter=require_radius(data.get("radius_meter")),
            company_id=company_id,
        )


class LocationService:
    """Office geofences and the WiFi access points registered at them."""

    def __init__(self, locations: LocationRepository):
        self._locations = locations

    def list_locations(self, *, company_id: Optional[int] = None) -> Sequence[Location]:
        if company_id:
            return self._locations.list_for_company(int(company_id))
        return self._locations.list_all()

    def get_location(self, location_id: int) -> Location:
        location = self._locations.get_by_id(int(location_id))
        if not location:
            raise NotFoundError("Location not found")
        return location

    def upsert_location(self, data: dict[str, Any], *, now: datetime) -> Location:
        """Create a location, or update it when ``data`` carries an id.

        The owning company is fixed at creation time.
        """

        location_id = int(data.get("id") or 0)
        parsed = LocationInput.parse(data, is_update=bool(location_id))

        if location_id:
            ok = self._locations.update(
                location_id=location_id,
                name=parsed.name,
                latitude=parsed.latitude,
                longitude=parsed.longitude,
                radius_meter=parsed.radius_meter,
                updated_at=now,
            )
            if not ok:
                raise NotFoundError("Location not found")
            logger.info("Location %s updated", location_id)
        else:
            location_id = self._locations.create(
                company_id=int(parsed.company_id),
                name=parsed.name,
                latitude=parsed.latitude,
                longitude=parsed.longitude,
                radius_meter=parsed.radius_meter,
            )
            logger.info("Location %s created for company %s", location_id, parsed.company_id)

        return self.get_location(location_id)

    def delete_location(self, location_id: int, *, now: datetime) -> None:
        self.get_location(location_id)
        if self._locations.count_wifi(int(location_id)) > 0:
            raise ConflictError(
                "Cannot delete a location that still has WiFi networks. Remove the WiFi entries first."
            )
        if not self._locations.soft_delete(int(location_id), deleted_at=now):
            raise NotFoundError("Location not found")
        logger.info("Location %s deleted", location_id)

    def upsert_wifi(self, location_id: int, data: dict[str, Any]) -> LocationWifi:
        ssid = require_non_empty(data.get("ssid_name"), "SSID")
        mac = require_mac_address(data.get("mac_address"))
        self.get_location(location_id)

        wifi_id = int(data.get("id") or 0)
        existing = self._locations.find_wifi_by_mac(location_id=int(location_id), mac_address=mac)
        if existing and existing.wifi_id != wifi_id:
            raise ConflictError("MAC address is already registered for this location")

        if wifi_id:
            if not self._locations.update_wifi(wifi_id=wifi_id, ssid_name=ssid, mac_address=mac):
                raise NotFoundError("WiFi network not found")
        else:
            wifi_id = self._locations.create_wifi(location_id=int(location_id), ssid_name=ssid, mac_address=mac)

        wifi = self._locations.get_wifi(wifi_id)
        if not wifi:
            raise ValidationError("Failed to save WiFi network")
        return wifi

    def delete_wifi(self, wifi_id: int, *, now: datetime) -> None:
        if not self._locations.delete_wifi(int(wifi_id), deleted_at=now):
            raise NotFoundError("WiFi network not found")
