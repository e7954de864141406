from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from ..common.validators import optional_text, require_latitude, require_longitude
from .model import Coordinate


class LocationProvider(Protocol):
    """Source of the device position reported for a check-in/out.

    The position is taken at face value; there is no anti-spoofing.
    """

    def current_position(self) -> Coordinate:
        raise NotImplementedError

    def wifi(self) -> tuple[Optional[str], Optional[str]]:
        """(ssid, mac) of the access point the device is connected to."""
        raise NotImplementedError


@dataclass(frozen=True)
class StaticLocationProvider:
    coordinate: Coordinate
    wifi_ssid: Optional[str] = None
    wifi_mac: Optional[str] = None

    def current_position(self) -> Coordinate:
        return self.coordinate

    def wifi(self) -> tuple[Optional[str], Optional[str]]:
        return self.wifi_ssid, self.wifi_mac


class PayloadLocationProvider:
    """Reads ``latitude``/``longitude`` (and optional WiFi) from a JSON body."""

    def __init__(self, payload: Optional[Mapping[str, Any]]):
        self._payload = payload or {}

    def current_position(self) -> Coordinate:
        return Coordinate(
            latitude=require_latitude(self._payload.get("latitude")),
            longitude=require_longitude(self._payload.get("longitude")),
        )

    def wifi(self) -> tuple[Optional[str], Optional[str]]:
        return optional_text(self._payload.get("wifi_ssid")), optional_text(self._payload.get("wifi_mac"))
