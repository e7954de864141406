from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ContractType, EmployeeStatus, Gender


@dataclass(frozen=True)
class Employee:
    """Employee master record."""

    employee_id: int
    company_id: int
    full_name: str
    email: str
    department_id: Optional[int] = None
    position_id: Optional[int] = None
    shift_id: Optional[int] = None
    phone_number: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    hire_date: Optional[date] = None
    termination_date: Optional[date] = None
    deleted_at: Optional[datetime] = None
    department_name: Optional[str] = None
    position_name: Optional[str] = None


@dataclass(frozen=True)
class EmployeeContract:
    contract_id: int
    employee_id: int
    contract_type: ContractType
    start_date: date
    salary_base: float
    end_date: Optional[date] = None

    def is_active_on(self, day: date) -> bool:
        return self.start_date <= day and (self.end_date is None or self.end_date >= day)


@dataclass(frozen=True)
class PersonnelDetails:
    """Indonesian payroll/tax identity fields; stored as opaque strings."""

    employee_id: int
    religion: Optional[str] = None
    marital_status: Optional[str] = None
    ptkp_status: Optional[str] = None
    ktp_address: Optional[str] = None
    domicile_address: Optional[str] = None
    npwp_number: Optional[str] = None


@dataclass(frozen=True)
class Education:
    education_id: int
    employee_id: int
    degree: str
    institution: str
    major: Optional[str] = None
    graduation_year: Optional[int] = None


@dataclass(frozen=True)
class EmployeeProfile:
    """Employee with everything hanging off it, as shown on the detail page."""

    employee: Employee
    status: EmployeeStatus
    contract: Optional[EmployeeContract] = None
    personnel: Optional[PersonnelDetails] = None
    educations: tuple[Education, ...] = ()
    username: Optional[str] = None
