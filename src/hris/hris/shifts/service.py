from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..attendance.timekeeping import shift_duration_hours
from ..common.datetime_utils import parse_clock_time
from ..common.validators import require_non_empty, require_positive_id
from ..core.constants import DEFAULT_TOLERANCE_MINUTES
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import WorkShift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


def _parse_tolerance(value: Any) -> int:
    if value is None or str(value).strip() == "":
        return DEFAULT_TOLERANCE_MINUTES
    try:
        tolerance = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Tolerance must be a whole number of minutes")
    if tolerance < 0:
        raise ValidationError("Tolerance cannot be negative")
    return tolerance


def _parse_bool(value: Any, default: bool = True) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


class ShiftService:
    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def list_shifts(self, *, position_id: Optional[int] = None) -> Sequence[WorkShift]:
        return self._shifts.list_all(position_id=position_id)

    def get_shift(self, shift_id: int) -> WorkShift:
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise NotFoundError("Work shift not found")
        return shift

    def _parse(self, data: dict[str, Any]) -> dict[str, Any]:
        name = require_non_empty(data.get("name"), "Shift name")
        start_time = parse_clock_time(require_non_empty(data.get("start_time"), "Start time"))
        end_time = parse_clock_time(require_non_empty(data.get("end_time"), "End time"))

        duration = shift_duration_hours(start_time, end_time)
        if duration <= 0:
            raise ValidationError("Shift duration must be greater than 0")

        return {
            "name": name,
            "start_time": start_time,
            "end_time": end_time,
            "duration_hours": round(duration, 2),
            "tolerance_minutes": _parse_tolerance(data.get("tolerance_minutes")),
            "is_regular": _parse_bool(data.get("is_regular")),
        }

    def _ensure_unique_name(self, *, position_id: int, name: str, shift_id: int = 0) -> None:
        existing = self._shifts.find_by_name(position_id=position_id, name=name)
        if existing and existing.shift_id != shift_id:
            raise ConflictError(f"Shift '{name}' already exists for this position")

    def upsert_shift(self, data: dict[str, Any], *, now: datetime) -> WorkShift:
        position_id = require_positive_id(data.get("position_id"), "Position")
        fields = self._parse(data)
        shift_id = int(data.get("id") or 0)
        self._ensure_unique_name(position_id=position_id, name=fields["name"], shift_id=shift_id)

        if shift_id:
            if not self._shifts.update(shift_id=shift_id, position_id=position_id, updated_at=now, **fields):
                raise NotFoundError("Work shift not found")
            logger.info("Work shift %s updated", shift_id)
        else:
            shift_id = self._shifts.create(position_id=position_id, **fields)
            logger.info("Work shift %s created for position %s", shift_id, position_id)

        return self.get_shift(shift_id)

    def bulk_create(self, position_ids: Sequence[Any], data: dict[str, Any]) -> list[WorkShift]:
        """Create the same shift template for several positions.

        Positions that already carry a shift with that name are skipped.
        """

        ids = sorted({require_positive_id(p, "Position") for p in position_ids or []})
        if not ids:
            raise ValidationError("Select at least one position")

        fields = self._parse(data)
        created: list[WorkShift] = []
        for position_id in ids:
            if self._shifts.find_by_name(position_id=position_id, name=fields["name"]):
                continue
            shift_id = self._shifts.create(position_id=position_id, **fields)
            created.append(self.get_shift(shift_id))

        logger.info("Bulk created %d work shifts named %r", len(created), fields["name"])
        return created

    def delete_shift(self, shift_id: int, *, now: datetime) -> None:
        self.get_shift(shift_id)
        if self._shifts.count_attendances(int(shift_id)) > 0:
            raise ConflictError("Cannot delete a shift that is referenced by attendance records")
        if not self._shifts.soft_delete(int(shift_id), deleted_at=now):
            raise NotFoundError("Work shift not found")
        logger.info("Work shift %s deleted", shift_id)
