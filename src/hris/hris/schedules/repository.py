from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import ScheduleRow, ShiftSchedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[ShiftSchedule]:
        raise NotImplementedError

    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[ShiftSchedule]:
        raise NotImplementedError

    def upsert(self, *, employee_id: int, work_date: date, shift_id: int, notes: Optional[str] = None) -> int:
        """Create or update a schedule assignment.

        A soft-deleted row for the same employee/date is revived. Returns the schedule id.
        """

        raise NotImplementedError

    def soft_delete(self, schedule_id: int, *, deleted_at: datetime) -> bool:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[ScheduleRow]:
        raise NotImplementedError
