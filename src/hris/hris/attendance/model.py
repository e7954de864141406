from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance row: one employee, one work date."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in: datetime
    check_out: Optional[datetime]
    status: AttendanceStatus
    is_late: bool = False
    late_minutes: int = 0
    working_hours: float = 0.0
    overtime_hours: float = 0.0
    shift_id: Optional[int] = None
    location_id: Optional[int] = None
    wifi_id: Optional[int] = None
    notes: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.check_out is not None


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for dashboards and reports (joined with employee/shift/location)."""

    attendance_id: int
    employee_id: int
    full_name: str
    work_date: date
    check_in: datetime
    check_out: Optional[datetime]
    status: AttendanceStatus
    is_late: bool
    late_minutes: int
    working_hours: float
    overtime_hours: float
    department_name: Optional[str] = None
    position_name: Optional[str] = None
    shift_name: Optional[str] = None
    location_name: Optional[str] = None
    wifi_ssid: Optional[str] = None
    notes: Optional[str] = None
