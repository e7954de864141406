"""Server actions: the uniform boundary in front of every use case.

Each method returns an ``ActionResult``; no exception escapes. Controllers
(and any other caller) only ever deal with ``{success, data?, error?, message?}``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from .attendance.service import AttendanceService, PositionSource
from .common.datetime_utils import parse_iso_date
from .common.results import server_action
from .common.validators import require_positive_id
from .core.constants import DEFAULT_REPORT_LIMIT
from .core.enums import Role
from .core.exceptions import ValidationError
from .employees.service import EmployeeService
from .locations.service import LocationService
from .masterdata.service import MasterDataService
from .overtime.service import OvertimeService
from .reports.service import ReportService
from .schedules.service import ScheduleService
from .shifts.service import ShiftService
from .users.service import AuthService, UserService


def _as_date(value: Any, field_name: str = "Date") -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field_name} is required")
    return parse_iso_date(str(value))


class HRActions:
    def __init__(
        self,
        *,
        attendance: AttendanceService,
        overtime: OvertimeService,
        reports: ReportService,
        locations: LocationService,
        shifts: ShiftService,
        schedules: ScheduleService,
        masterdata: MasterDataService,
        employees: EmployeeService,
        auth: AuthService,
        users: UserService,
    ):
        self._attendance = attendance
        self._overtime = overtime
        self._reports = reports
        self._locations = locations
        self._shifts = shifts
        self._schedules = schedules
        self._masterdata = masterdata
        self._employees = employees
        self._auth = auth
        self._users = users

    # Session
    @server_action("Failed to sign in")
    def login(self, username: str, password: str):
        return self._auth.authenticate(username, password)

    @server_action("Failed to change password", success_message="Password changed")
    def change_password(self, user_id: int, current_password: str, new_password: str):
        self._users.change_password(user_id, current_password=current_password, new_password=new_password)

    # Attendance
    @server_action("Failed to check in", success_message="Check-in recorded")
    def check_in(self, employee_id: int, source: PositionSource, *, now: datetime, notes: Optional[str] = None):
        return self._attendance.check_in(employee_id, source, now=now, notes=notes)

    @server_action("Failed to check out", success_message="Check-out recorded")
    def check_out(
        self,
        attendance_id: Any,
        source: PositionSource,
        *,
        now: datetime,
        employee_id: Optional[int] = None,
        notes: Optional[str] = None,
    ):
        return self._attendance.check_out(
            require_positive_id(attendance_id, "Attendance"),
            source,
            now=now,
            employee_id=employee_id,
            notes=notes,
        )

    @server_action("Failed to check out", success_message="Check-out recorded")
    def check_out_today(self, employee_id: int, source: PositionSource, *, now: datetime, notes: Optional[str] = None):
        return self._attendance.check_out_today(employee_id, source, now=now, notes=notes)

    @server_action("Failed to load today's attendance")
    def get_my_attendance_today(self, employee_id: int, *, work_date: date):
        status = self._attendance.get_my_attendance_today(employee_id, work_date=work_date)
        return {
            "work_date": status.work_date,
            "record": status.record,
            "shift": status.shift,
            "can_check_in": status.can_check_in,
            "can_check_out": status.can_check_out,
        }

    @server_action("Failed to load attendance")
    def get_today_attendance(self, company_id: int, *, work_date: date):
        return list(self._attendance.get_today_attendance(company_id, work_date=work_date))

    @server_action("Failed to load attendance history")
    def get_attendance_history(self, employee_id: int, limit: int = 15):
        return list(self._attendance.get_history(employee_id, limit=limit))

    # Overtime
    @server_action("Failed to load overtime records")
    def get_overtime_records(
        self,
        employee_id: Optional[int] = None,
        status: Optional[str] = None,
        start_date: Any = None,
        end_date: Any = None,
    ):
        return list(
            self._overtime.get_records(employee_id=employee_id, status=status, start_date=start_date, end_date=end_date)
        )

    @server_action("Failed to submit overtime", success_message="Overtime submitted")
    def request_overtime(self, employee_id: int, start_time: datetime, end_time: datetime, reason: Optional[str] = None):
        return self._overtime.request_overtime(
            employee_id=employee_id,
            start_time=start_time,
            end_time=end_time,
            reason=reason,
        )

    @server_action("Failed to approve overtime")
    def approve_overtime(
        self,
        overtime_id: int,
        approver_id: int,
        action: str,
        notes: Optional[str] = None,
        *,
        current_role: Role,
        now: datetime,
    ):
        return self._overtime.approve(overtime_id, approver_id, action, notes, current_role=current_role, now=now)

    @server_action("Failed to load overtime summary")
    def get_overtime_summary(self, employee_id: int, year_month: str):
        return self._overtime.get_summary(employee_id, year_month)

    # Reports
    @server_action("Failed to generate report", success_message="Report generated")
    def generate_attendance_report(
        self,
        company_id: int,
        report_type: str,
        start_date: Any,
        end_date: Any,
        *,
        generated_at: datetime,
    ):
        return self._reports.generate_attendance_report(
            company_id,
            report_type,
            _as_date(start_date, "Start date"),
            _as_date(end_date, "End date"),
            generated_at=generated_at,
        )

    @server_action("Failed to load reports")
    def get_attendance_reports(self, company_id: int, report_type: Optional[str] = None, limit: int = DEFAULT_REPORT_LIMIT):
        return list(self._reports.get_attendance_reports(company_id, report_type, limit))

    # Locations
    @server_action("Failed to load locations")
    def get_locations(self, company_id: Optional[int] = None):
        return list(self._locations.list_locations(company_id=company_id))

    @server_action("Failed to load location")
    def get_location(self, location_id: int):
        return self._locations.get_location(location_id)

    @server_action("Failed to save location", success_message="Location saved")
    def upsert_location(self, data: dict, *, now: datetime):
        return self._locations.upsert_location(data, now=now)

    @server_action("Failed to delete location", success_message="Location deleted")
    def delete_location(self, location_id: int, *, now: datetime):
        self._locations.delete_location(location_id, now=now)

    @server_action("Failed to save WiFi network", success_message="WiFi network saved")
    def upsert_location_wifi(self, location_id: int, data: dict):
        return self._locations.upsert_wifi(location_id, data)

    @server_action("Failed to delete WiFi network", success_message="WiFi network deleted")
    def delete_location_wifi(self, wifi_id: int, *, now: datetime):
        self._locations.delete_wifi(wifi_id, now=now)

    # Work shifts
    @server_action("Failed to load work shifts")
    def get_work_shifts(self, position_id: Optional[int] = None):
        return list(self._shifts.list_shifts(position_id=position_id))

    @server_action("Failed to save work shift", success_message="Work shift saved")
    def upsert_work_shift(self, data: dict, *, now: datetime):
        return self._shifts.upsert_shift(data, now=now)

    @server_action("Failed to create work shifts")
    def bulk_create_work_shifts(self, position_ids: Sequence[Any], data: dict):
        return self._shifts.bulk_create(position_ids, data)

    @server_action("Failed to delete work shift", success_message="Work shift deleted")
    def delete_work_shift(self, shift_id: int, *, now: datetime):
        self._shifts.delete_shift(shift_id, now=now)

    # Shift schedules
    @server_action("Failed to load schedules")
    def get_shift_schedules(self, start: Any, end: Any, employee_id: Optional[int] = None):
        return list(self._schedules.list_range(start=start, end=end, employee_id=employee_id))

    @server_action("Failed to assign shift", success_message="Shift assigned")
    def assign_shift_schedule(self, employee_id: Any, work_date: Any, shift_id: Any, notes: Optional[str] = None):
        return self._schedules.assign(
            employee_id=employee_id,
            work_date=_as_date(work_date, "Work date"),
            shift_id=shift_id,
            notes=notes,
        )

    @server_action("Failed to assign shifts")
    def bulk_assign_shift_schedules(
        self,
        employee_ids: Sequence[Any],
        start: Any,
        end: Any,
        shift_id: Any,
        notes: Optional[str] = None,
    ):
        count = self._schedules.bulk_assign(
            employee_ids=employee_ids,
            start=_as_date(start, "Start date"),
            end=_as_date(end, "End date"),
            shift_id=shift_id,
            notes=notes,
        )
        return {"assigned": count}

    @server_action("Failed to delete schedule", success_message="Schedule deleted")
    def delete_shift_schedule(self, schedule_id: int, *, now: datetime):
        self._schedules.delete(schedule_id, now=now)

    # Companies
    @server_action("Failed to load companies")
    def get_companies(self):
        return list(self._masterdata.list_companies())

    @server_action("Failed to save company", success_message="Company saved")
    def upsert_company(self, data: dict, *, now: datetime):
        return self._masterdata.upsert_company(data, now=now)

    @server_action("Failed to delete company", success_message="Company deleted")
    def delete_company(self, company_id: int, *, now: datetime):
        self._masterdata.delete_company(company_id, now=now)

    # Departments
    @server_action("Failed to load departments")
    def get_departments(self, company_id: Optional[int] = None):
        return list(self._masterdata.list_departments(company_id=company_id))

    @server_action("Failed to save department", success_message="Department saved")
    def upsert_department(self, data: dict, *, now: datetime):
        return self._masterdata.upsert_department(data, now=now)

    @server_action("Failed to delete department", success_message="Department deleted")
    def delete_department(self, department_id: int, *, now: datetime):
        self._masterdata.delete_department(department_id, now=now)

    # Position levels
    @server_action("Failed to load position levels")
    def get_position_levels(self):
        return list(self._masterdata.list_position_levels())

    @server_action("Failed to save position level", success_message="Position level saved")
    def upsert_position_level(self, data: dict, *, now: datetime):
        return self._masterdata.upsert_position_level(data, now=now)

    @server_action("Failed to delete position level", success_message="Position level deleted")
    def delete_position_level(self, level_id: int, *, now: datetime):
        self._masterdata.delete_position_level(level_id, now=now)

    # Positions
    @server_action("Failed to load positions")
    def get_positions(self, department_id: Optional[int] = None):
        return list(self._masterdata.list_positions(department_id=department_id))

    @server_action("Failed to save position", success_message="Position saved")
    def upsert_position(self, data: dict, *, now: datetime):
        return self._masterdata.upsert_position(data, now=now)

    @server_action("Failed to delete position", success_message="Position deleted")
    def delete_position(self, position_id: int, *, now: datetime):
        self._masterdata.delete_position(position_id, now=now)

    # Roles
    @server_action("Failed to load roles")
    def get_roles(self):
        return list(self._masterdata.list_roles())

    @server_action("Failed to save role", success_message="Role saved")
    def upsert_role(self, data: dict, *, now: datetime):
        return self._masterdata.upsert_role(data, now=now)

    @server_action("Failed to delete role", success_message="Role deleted")
    def delete_role(self, role_id: int, *, now: datetime):
        self._masterdata.delete_role(role_id, now=now)

    # Employees
    @server_action("Failed to load employees")
    def get_employees(self, company_id: Optional[int] = None, include_deleted: bool = False):
        return list(self._employees.list_employees(company_id=company_id, include_deleted=include_deleted))

    @server_action("Failed to load employee")
    def get_employee(self, employee_id: int, *, today: date):
        return self._employees.get_employee(employee_id, today=today, include_deleted=True)

    @server_action("An unexpected error occurred while creating the employee", success_message="Employee created")
    def create_employee_with_user(self, data: dict, *, today: date):
        return self._employees.create_employee_with_user(data, today=today)

    @server_action("Failed to update employee", success_message="Employee updated")
    def update_employee(self, employee_id: int, data: dict, *, now: datetime):
        return self._employees.update_employee(employee_id, data, now=now)

    @server_action("Failed to update personnel details", success_message="Personnel details saved")
    def update_personnel_details(self, employee_id: int, data: dict):
        return self._employees.update_personnel_details(employee_id, data)

    @server_action("Failed to archive employee", success_message="Employee archived")
    def soft_delete_employee(self, employee_id: int, *, now: datetime):
        self._employees.soft_delete_employee(employee_id, now=now)

    @server_action("Failed to restore employee", success_message="Employee restored")
    def restore_employee(self, employee_id: int):
        self._employees.restore_employee(employee_id)

    @server_action("Failed to load education records")
    def get_employee_educations(self, employee_id: int):
        return list(self._employees.list_educations(employee_id))

    @server_action("Failed to save education record", success_message="Education record added")
    def create_employee_education(self, employee_id: int, data: dict):
        return {"id": self._employees.add_education(employee_id, data)}

    @server_action("Failed to save education record", success_message="Education record updated")
    def update_employee_education(self, education_id: int, data: dict):
        self._employees.update_education(education_id, data)

    @server_action("Failed to delete education record", success_message="Education record deleted")
    def delete_employee_education(self, education_id: int, *, now: datetime):
        self._employees.delete_education(education_id, now=now)
