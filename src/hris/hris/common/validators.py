from __future__ import annotations

import math
import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

MAC_ADDRESS_RE = re.compile(r"^([0-9A-Fa-f]{2}:){5}[0-9A-Fa-f]{2}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_text(value: Any) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    return text or None


def require_number(value: Any, field_name: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def require_positive_id(value: Any, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field_name} is invalid")
    if parsed <= 0:
        raise ValidationError(f"{field_name} is required")
    return parsed


def require_latitude(value: Any) -> float:
    lat = require_number(value, "Latitude")
    if lat < -90 or lat > 90:
        raise ValidationError("Latitude must be between -90 and 90")
    return lat


def require_longitude(value: Any) -> float:
    lng = require_number(value, "Longitude")
    if lng < -180 or lng > 180:
        raise ValidationError("Longitude must be between -180 and 180")
    return lng


def require_radius(value: Any) -> float:
    radius = require_number(value, "Radius")
    if radius <= 0:
        raise ValidationError("Radius must be greater than 0")
    return radius


def require_mac_address(value: Optional[str]) -> str:
    mac = require_non_empty(value, "MAC address")
    if not MAC_ADDRESS_RE.match(mac):
        raise ValidationError("Invalid MAC address format (example: AA:BB:CC:DD:EE:FF)")
    return mac.upper()


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email.lower()
