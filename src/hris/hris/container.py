from __future__ import annotations

from dataclasses import dataclass

from .actions import HRActions
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_OVERTIME_HOURLY_DIVISOR, DEFAULT_OVERTIME_MULTIPLIER, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.service import LocationService
from .masterdata.mysql_masterdata_repository import (
    MySQLCompanyRepository,
    MySQLDepartmentRepository,
    MySQLPositionLevelRepository,
    MySQLPositionRepository,
    MySQLRoleRepository,
)
from .masterdata.service import MasterDataService
from .overtime.calculator.standard_calculator import StandardOvertimeCalculator
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.service import OvertimeService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.service import ShiftService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    timezone: str

    attendance_service: AttendanceService
    overtime_service: OvertimeService
    report_service: ReportService
    location_service: LocationService
    shift_service: ShiftService
    schedule_service: ScheduleService
    masterdata_service: MasterDataService
    employee_service: EmployeeService
    auth_service: AuthService
    user_service: UserService

    actions: HRActions


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    overtime_multiplier: float = DEFAULT_OVERTIME_MULTIPLIER,
    overtime_hourly_divisor: float = DEFAULT_OVERTIME_HOURLY_DIVISOR,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    locations_repo = MySQLLocationRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    overtime_repo = MySQLOvertimeRepository(conn)
    reports_repo = MySQLReportRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        shifts_repo,
        locations_repo,
        schedules_repo,
        overtime_repo,
        strategy_factory=AttendanceStrategyFactory(),
        overtime_multiplier=overtime_multiplier,
        tx=conn,
    )
    overtime_service = OvertimeService(
        overtime_repo,
        employees_repo,
        calculator=StandardOvertimeCalculator(overtime_hourly_divisor),
        default_multiplier=overtime_multiplier,
    )
    report_service = ReportService(attendance_repo, employees_repo, reports_repo)
    location_service = LocationService(locations_repo)
    shift_service = ShiftService(shifts_repo)
    schedule_service = ScheduleService(schedules_repo, shifts_repo)
    masterdata_service = MasterDataService(
        companies=MySQLCompanyRepository(conn),
        departments=MySQLDepartmentRepository(conn),
        levels=MySQLPositionLevelRepository(conn),
        positions=MySQLPositionRepository(conn),
        roles=MySQLRoleRepository(conn),
        shifts=shifts_repo,
        users=users_repo,
        tx=conn,
    )
    employee_service = EmployeeService(employees_repo, users_repo, conn)
    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo)

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
        conn=conn,
        timezone=timezone,
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
