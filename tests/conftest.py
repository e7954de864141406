from __future__ import annotations

from datetime import datetime, time

import pytest
from werkzeug.security import generate_password_hash

from src.hris.hris.actions import HRActions
from src.hris.hris.attendance.service import AttendanceService
from src.hris.hris.container import Container
from src.hris.hris.core.enums import Role
from src.hris.hris.employees.model import Employee
from src.hris.hris.employees.service import EmployeeService
from src.hris.hris.locations.model import Location, LocationWifi
from src.hris.hris.locations.service import LocationService
from src.hris.hris.masterdata.model import Company, Department, Position, PositionLevel, RoleDefinition
from src.hris.hris.masterdata.service import MasterDataService
from src.hris.hris.overtime.service import OvertimeService
from src.hris.hris.reports.service import ReportService
from src.hris.hris.schedules.service import ScheduleService
from src.hris.hris.shifts.model import WorkShift
from src.hris.hris.shifts.service import ShiftService
from src.hris.hris.users.model import User
from src.hris.hris.users.service import AuthService, UserService
from tests.fakes import (
    FakeTransaction,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryLocations,
    InMemoryMaster,
    InMemoryOvertime,
    InMemorySchedules,
    InMemoryShifts,
    InMemoryUsers,
)

OFFICE_LAT = -6.2000
OFFICE_LNG = 106.8166


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 0, 0)


@pytest.fixture
def office() -> Location:
    return Location(
        location_id=1,
        company_id=1,
        name="Head Office",
        latitude=OFFICE_LAT,
        longitude=OFFICE_LNG,
        radius_meter=100.0,
        wifi=(LocationWifi(wifi_id=7, location_id=1, ssid_name="HQ-Staff", mac_address="AA:BB:CC:DD:EE:FF"),),
    )


@pytest.fixture
def day_shift() -> WorkShift:
    return WorkShift(
        shift_id=1,
        position_id=10,
        name="Day",
        start_time=time(8, 0),
        end_time=time(17, 0),
        duration_hours=9.0,
        tolerance_minutes=5,
    )


@pytest.fixture
def employee() -> Employee:
    return Employee(
        employee_id=1,
        company_id=1,
        full_name="Budi Santoso",
        email="budi@example.com",
        department_id=3,
        position_id=10,
    )


class NullReports:
    def create(self, report):
        return 1

    def get_by_id(self, report_id):
        return None

    def list_for_company(self, *, company_id, report_type=None, limit=10):
        return []


@pytest.fixture
def hris_container(employee, day_shift, office):
    """Container wired with in-memory repositories, as ``build_container`` does with MySQL ones."""

    attendance = InMemoryAttendance()
    employees = InMemoryEmployees([employee])
    shifts = InMemoryShifts([day_shift])
    locations = InMemoryLocations([office])
    schedules = InMemorySchedules()
    overtime = InMemoryOvertime()
    users = InMemoryUsers(
        [
            User(
                user_id=1,
                username="budi",
                password_hash=generate_password_hash("secret123"),
                role=Role.STAFF,
                employee_id=1,
                company_id=1,
                full_name="Budi Santoso",
            ),
            User(
                user_id=2,
                username="admin",
                password_hash=generate_password_hash("admin123"),
                role=Role.ADMIN,
                company_id=1,
                full_name="Administrator",
            ),
            User(
                user_id=3,
                username="kiosk",
                password_hash=generate_password_hash("kiosk123"),
                role=Role.STAFF,
                company_id=1,
            ),
        ]
    )
    tx = FakeTransaction()

    attendance_service = AttendanceService(attendance, employees, shifts, locations, schedules, overtime, tx=tx)
    overtime_service = OvertimeService(overtime, employees)
    report_service = ReportService(attendance, employees, NullReports())
    location_service = LocationService(locations)
    shift_service = ShiftService(shifts)
    schedule_service = ScheduleService(schedules, shifts)
    masterdata_service = MasterDataService(
        companies=InMemoryMaster(lambda i, f: Company(company_id=i, **f), id_attr="company_id"),
        departments=InMemoryMaster(
            lambda i, f: Department(department_id=i, **f), id_attr="department_id", parent_attr="company_id"
        ),
        levels=InMemoryMaster(lambda i, f: PositionLevel(level_id=i, **f), id_attr="level_id"),
        positions=InMemoryMaster(
            lambda i, f: Position(position_id=i, **f), id_attr="position_id", parent_attr="department_id"
        ),
        roles=InMemoryMaster(lambda i, f: RoleDefinition(role_id=i, **f), id_attr="role_id"),
        shifts=shifts,
        users=users,
        tx=tx,
    )
    employee_service = EmployeeService(employees, users, tx)
    auth_service = AuthService(users)
    user_service = UserService(users)

    actions = HRActions(
        attendance=attendance_service,
        overtime=overtime_service,
        reports=report_service,
        locations=location_service,
        shifts=shift_service,
        schedules=schedule_service,
        masterdata=masterdata_service,
        employees=employee_service,
        auth=auth_service,
        users=user_service,
    )
    return Container(
        conn=None,
        timezone="Asia/Jakarta",
        attendance_service=attendance_service,
        overtime_service=overtime_service,
        report_service=report_service,
        location_service=location_service,
        shift_service=shift_service,
        schedule_service=schedule_service,
        masterdata_service=masterdata_service,
        employee_service=employee_service,
        auth_service=auth_service,
        user_service=user_service,
        actions=actions,
    )


@pytest.fixture
def hr_actions(hris_container):
    return hris_container.actions
