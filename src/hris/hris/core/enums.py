from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Access level stored on the user account."""

    ADMIN = "admin"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Attendance status values as stored in the database."""

    PRESENT = "Hadir"
    LATE = "Terlambat"
    PERMIT = "Izin"
    LEAVE = "Cuti"
    BUSINESS_TRIP = "Dinas"


class OvertimeStatus(str, Enum):
    """Overtime approval workflow states."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ReportType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ContractType(str, Enum):
    PROBATION = "Probation"
    CONTRACT = "Contract"
    PERMANENT = "Permanent"


class EmployeeStatus(str, Enum):
    """Derived from contracts and termination date, never stored."""

    PROBATION = "PROBATION"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"


class Gender(str, Enum):
    MALE = "L"
    FEMALE = "P"
