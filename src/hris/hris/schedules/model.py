from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class ShiftSchedule:
    """Shift assigned to one employee on one date; overrides the default shift."""

    schedule_id: int
    employee_id: int
    work_date: date
    shift_id: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class ScheduleRow:
    """Read-model for schedule tables (joined with employee and shift)."""

    schedule_id: int
    work_date: date
    employee_id: int
    full_name: str
    shift_id: int
    shift_name: str
    start_time: str
    end_time: str
    notes: Optional[str] = None
