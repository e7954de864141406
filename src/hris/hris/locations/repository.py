from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Location, LocationWifi


class LocationRepository(Protocol):
    def list_all(self) -> Sequence[Location]:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[Location]:
        raise NotImplementedError

    def get_by_id(self, location_id: int) -> Optional[Location]:
        raise NotImplementedError

    def create(self, *, company_id: int, name: str, latitude: float, longitude: float, radius_meter: float) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        location_id: int,
        name: str,
        latitude: float,
        longitude: float,
        radius_meter: float,
        updated_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def soft_delete(self, location_id: int, *, deleted_at: datetime) -> bool:
        raise NotImplementedError

    # WiFi access points
    def count_wifi(self, location_id: int) -> int:
        raise NotImplementedError

    def get_wifi(self, wifi_id: int) -> Optional[LocationWifi]:
        raise NotImplementedError

    def find_wifi_by_mac(self, *, location_id: int, mac_address: str) -> Optional[LocationWifi]:
        raise NotImplementedError

    def create_wifi(self, *, location_id: int, ssid_name: str, mac_address: str) -> int:
        raise NotImplementedError

    def update_wifi(self, *, wifi_id: int, ssid_name: str, mac_address: str) -> bool:
        raise NotImplementedError

    def delete_wifi(self, wifi_id: int, *, deleted_at: datetime) -> bool:
        raise NotImplementedError
