from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_check_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
        is_late: bool,
        late_minutes: int,
        shift_id: Optional[int] = None,
        location_id: Optional[int] = None,
        wifi_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Insert the day's row.

        Raises AlreadyCheckedInError when a row for (employee, work_date) exists.
        """

        raise NotImplementedError

    def complete_check_out(
        self,
        *,
        attendance_id: int,
        check_out: datetime,
        working_hours: float,
        overtime_hours: float,
        notes: Optional[str] = None,
    ) -> bool:
        """Fill check-out fields only while check_out is still empty.

        Returns False when another request already checked the row out.
        """

        raise NotImplementedError

    def list_rows(
        self,
        *,
        company_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRow]:
        raise NotImplementedError
