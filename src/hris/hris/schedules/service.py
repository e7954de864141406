from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import iter_dates, parse_iso_date
from ..common.validators import optional_text, require_positive_id
from ..core.exceptions import NotFoundError, ValidationError
from ..shifts.model import WorkShift
from ..shifts.repository import ShiftRepository
from .model import ScheduleRow, ShiftSchedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, shifts: ShiftRepository):
        self._schedules = schedules
        self._shifts = shifts

    def _require_shift(self, shift_id: int) -> WorkShift:
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise NotFoundError("Work shift not found")
        return shift

    def assign(
        self,
        *,
        employee_id: Any,
        work_date: date,
        shift_id: Any,
        notes: Optional[str] = None,
    ) -> ShiftSchedule:
        employee_id = require_positive_id(employee_id, "Employee")
        shift_id = require_positive_id(shift_id, "Work shift")
        self._require_shift(shift_id)

        schedule_id = self._schedules.upsert(
            employee_id=employee_id,
            work_date=work_date,
            shift_id=shift_id,
            notes=optional_text(notes),
        )
        logger.info("Employee %s scheduled on %s for shift %s", employee_id, work_date, shift_id)
        return ShiftSchedule(
            schedule_id=schedule_id,
            employee_id=employee_id,
            work_date=work_date,
            shift_id=shift_id,
            notes=optional_text(notes),
        )

    def bulk_assign(
        self,
        *,
        employee_ids: Sequence[Any],
        start: date,
        end: date,
        shift_id: Any,
        notes: Optional[str] = None,
    ) -> int:
        """Assign one shift to several employees for every date in a range."""

        if end < start:
            raise ValidationError("End date must not be before start date")
        ids = sorted({require_positive_id(e, "Employee") for e in employee_ids or []})
        if not ids:
            raise ValidationError("Select at least one employee")

        shift_id = require_positive_id(shift_id, "Work shift")
        self._require_shift(shift_id)

        count = 0
        for employee_id in ids:
            for d in iter_dates(start, end):
                self._schedules.upsert(employee_id=employee_id, work_date=d, shift_id=shift_id, notes=optional_text(notes))
                count += 1
        logger.info("Bulk scheduled %d employee-days on shift %s", count, shift_id)
        return count

    def delete(self, schedule_id: int, *, now: datetime) -> None:
        if not self._schedules.soft_delete(int(schedule_id), deleted_at=now):
            raise NotFoundError("Schedule not found")

    def list_range(self, *, start: Any, end: Any, employee_id: Optional[int] = None) -> Sequence[ScheduleRow]:
        start_d = start if isinstance(start, date) else parse_iso_date(start)
        end_d = end if isinstance(end, date) else parse_iso_date(end)
        if end_d < start_d:
            raise ValidationError("End date must not be before start date")
        return self._schedules.list_range(start=start_d, end=end_d, employee_id=employee_id)

    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[ShiftSchedule]:
        return self._schedules.get_for_employee_and_date(employee_id=int(employee_id), work_date=work_date)
