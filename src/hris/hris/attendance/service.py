from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence, Union

from ..core.constants import DEFAULT_OVERTIME_MULTIPLIER
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthorizationError,
    NotCheckedInYetError,
    NotFoundError,
)
from ..database.connection import Transactional
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..geofence.evaluator import evaluate_position
from ..geofence.model import Coordinate, LocationMatch
from ..geofence.provider import LocationProvider, StaticLocationProvider
from ..locations.repository import LocationRepository
from ..overtime.repository import OvertimeRepository
from ..schedules.repository import ScheduleRepository
from ..shifts.model import WorkShift
from ..shifts.repository import ShiftRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceRow
from .repository import AttendanceRepository
from .timekeeping import evaluate_check_in, evaluate_check_out, shift_window

logger = logging.getLogger(__name__)

PositionSource = Union[LocationProvider, Coordinate]


@dataclass(frozen=True)
class TodayStatus:
    """What the check-in card needs to render for one employee."""

    work_date: date
    record: Optional[AttendanceRecord]
    shift: Optional[WorkShift]

    @property
    def can_check_in(self) -> bool:
        return self.record is None

    @property
    def can_check_out(self) -> bool:
        return self.record is not None and self.record.check_out is None


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        shifts: ShiftRepository,
        locations: LocationRepository,
        schedules: ScheduleRepository | None = None,
        overtime: OvertimeRepository | None = None,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        overtime_multiplier: float = DEFAULT_OVERTIME_MULTIPLIER,
        tx: Transactional | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._shifts = shifts
        self._locations = locations
        self._schedules = schedules
        self._overtime = overtime
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._overtime_multiplier = float(overtime_multiplier)
        self._tx = tx

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_effective_shift(self, employee: Employee, work_date: date) -> Optional[WorkShift]:
        """Schedule for the date, else the employee's shift, else the position's first shift."""

        if self._schedules:
            sc = self._schedules.get_for_employee_and_date(employee_id=employee.employee_id, work_date=work_date)
            if sc:
                shift = self._shifts.get_by_id(sc.shift_id)
                if shift:
                    return shift

        if employee.shift_id:
            shift = self._shifts.get_by_id(employee.shift_id)
            if shift:
                return shift

        if employee.position_id:
            return self._shifts.first_for_position(employee.position_id)
        return None

    def _locate(self, employee: Employee, source: PositionSource) -> LocationMatch:
        provider = StaticLocationProvider(source) if isinstance(source, Coordinate) else source
        point = provider.current_position()
        ssid, mac = provider.wifi()
        locations = self._locations.list_for_company(employee.company_id)
        return evaluate_position(point, locations, wifi_ssid=ssid, wifi_mac=mac)

    def check_in(
        self,
        employee_id: int,
        source: PositionSource,
        *,
        now: datetime,
        work_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        work_date = work_date or now.date()
        employee = self._get_employee(employee_id)

        if self._attendance.get_for_employee_and_date(employee.employee_id, work_date):
            raise AlreadyCheckedInError("You have already checked in today")

        match = self._locate(employee, source)
        shift = self.get_effective_shift(employee, work_date)

        evaluation = evaluate_check_in(now, shift, work_date)
        decision = self._factory.for_checkin(evaluation).decide_checkin(evaluation)

        attendance_id = self._attendance.create_check_in(
            employee_id=employee.employee_id,
            work_date=work_date,
            check_in=now,
            status=decision.status,
            is_late=decision.is_late,
            late_minutes=decision.late_minutes,
            shift_id=shift.shift_id if shift else None,
            location_id=match.location.location_id,
            wifi_id=match.wifi.wifi_id if match.wifi else None,
            notes=notes,
        )
        logger.info(
            "Employee %s checked in at %s (%s, %.0fm from %s)",
            employee.employee_id,
            now.isoformat(),
            decision.status.value,
            match.distance_meters,
            match.location.name,
        )

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def check_out(
        self,
        attendance_id: int,
        source: PositionSource,
        *,
        now: datetime,
        employee_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Complete an attendance row.

        When ``employee_id`` is given the row must belong to that employee.
        """

        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotCheckedInYetError("You have not checked in yet")
        if employee_id is not None and record.employee_id != int(employee_id):
            raise AuthorizationError("This attendance record belongs to another employee")
        if record.check_out is not None:
            raise AlreadyCheckedOutError("You have already checked out")

        employee = self._get_employee(record.employee_id)
        self._locate(employee, source)

        shift = self._shifts.get_by_id(record.shift_id) if record.shift_id else None
        evaluation = evaluate_check_out(record.check_in, now, shift, work_date=record.work_date)

        # The completed row and its pending overtime commit together.
        with self._tx.transaction() if self._tx else nullcontext():
            updated = self._attendance.complete_check_out(
                attendance_id=record.attendance_id,
                check_out=now,
                working_hours=evaluation.working_hours,
                overtime_hours=evaluation.overtime_hours,
                notes=notes,
            )
            if not updated:
                raise AlreadyCheckedOutError("You have already checked out")

            if evaluation.overtime_hours > 0 and evaluation.shift_end and self._overtime:
                overtime_id = self._overtime.create_pending(
                    employee_id=record.employee_id,
                    attendance_id=record.attendance_id,
                    overtime_date=record.work_date,
                    start_time=evaluation.shift_end,
                    end_time=now,
                    duration_hours=evaluation.overtime_hours,
                    multiplier=self._overtime_multiplier,
                )
                logger.info(
                    "Overtime %s (%.2fh) pending for employee %s",
                    overtime_id,
                    evaluation.overtime_hours,
                    record.employee_id,
                )

        logger.info(
            "Employee %s checked out at %s (%.2fh worked)",
            record.employee_id,
            now.isoformat(),
            evaluation.working_hours,
        )
        completed = self._attendance.get_by_id(record.attendance_id)
        if not completed:
            raise NotFoundError("Attendance record not found")
        return completed

    def check_out_today(
        self,
        employee_id: int,
        source: PositionSource,
        *,
        now: datetime,
        work_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        day = work_date or now.date()
        record = self._attendance.get_for_employee_and_date(int(employee_id), day)
        if not record and work_date is None:
            record = self._open_overnight_row(int(employee_id), day)
        if not record:
            raise NotCheckedInYetError("You have not checked in yet")
        return self.check_out(record.attendance_id, source, now=now, employee_id=employee_id, notes=notes)

    def _open_overnight_row(self, employee_id: int, day: date) -> Optional[AttendanceRecord]:
        """Yesterday's open row when its shift ends on ``day``."""

        previous = self._attendance.get_for_employee_and_date(employee_id, day - timedelta(days=1))
        if not previous or previous.check_out is not None or not previous.shift_id:
            return None
        shift = self._shifts.get_by_id(previous.shift_id)
        if not shift:
            return None
        _, shift_end = shift_window(shift, previous.work_date)
        return previous if shift_end.date() == day else None

    def get_my_attendance_today(self, employee_id: int, *, work_date: date) -> TodayStatus:
        employee = self._get_employee(employee_id)
        return TodayStatus(
            work_date=work_date,
            record=self._attendance.get_for_employee_and_date(employee.employee_id, work_date),
            shift=self.get_effective_shift(employee, work_date),
        )

    def get_today_attendance(self, company_id: int, *, work_date: date) -> Sequence[AttendanceRow]:
        return self._attendance.list_rows(company_id=int(company_id), start_date=work_date, end_date=work_date)

    def get_history(self, employee_id: int, *, limit: int = 15) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_employee(int(employee_id), int(limit))
