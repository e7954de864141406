from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import parse_iso_date
from ..common.validators import (
    optional_text,
    require_email,
    require_min_length,
    require_non_empty,
    require_number,
    require_positive_id,
)
from ..core.enums import ContractType, EmployeeStatus, Gender, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.connection import Transactional
from ..users.repository import UserRepository
from .model import Education, Employee, EmployeeContract, EmployeeProfile, PersonnelDetails
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

TEMP_PASSWORD_LENGTH = 12
_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"
PERSONNEL_FIELDS = ("religion", "marital_status", "ptkp_status", "ktp_address", "domicile_address", "npwp_number")


def generate_temporary_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


def derive_status(employee: Employee, contract: Optional[EmployeeContract], *, on: date) -> EmployeeStatus:
    """Employment status is never stored; it follows from termination and the active contract."""

    if employee.termination_date and employee.termination_date <= on:
        return EmployeeStatus.TERMINATED
    if contract is None or not contract.is_active_on(on):
        return EmployeeStatus.INACTIVE
    if contract.contract_type == ContractType.PROBATION:
        return EmployeeStatus.PROBATION
    return EmployeeStatus.ACTIVE


def _optional_id(value: Any, field_name: str) -> Optional[int]:
    if value in (None, "", 0, "0"):
        return None
    return require_positive_id(value, field_name)


def _optional_date(value: Any) -> Optional[date]:
    if not value:
        return None
    return value if isinstance(value, date) else parse_iso_date(str(value))


def _parse_gender(value: Any) -> Optional[str]:
    if not value:
        return None
    try:
        return Gender(str(value).strip().upper()).value
    except ValueError:
        raise ValidationError("Gender must be L or P")


def _parse_education(data: dict[str, Any]) -> dict[str, Any]:
    year = data.get("graduation_year")
    graduation_year = None
    if year not in (None, ""):
        graduation_year = int(require_number(year, "Graduation year"))
        if graduation_year < 1900 or graduation_year > 2100:
            raise ValidationError("Graduation year is out of range")
    return {
        "degree": require_non_empty(data.get("degree"), "Degree"),
        "institution": require_non_empty(data.get("institution"), "Institution"),
        "major": optional_text(data.get("major")),
        "graduation_year": graduation_year,
    }


@dataclass(frozen=True)
class CreatedEmployee:
    employee: Employee
    username: Optional[str] = None
    temp_password: Optional[str] = None


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, users: UserRepository, tx: Transactional):
        self._employees = employees
        self._users = users
        self._tx = tx

    def _parse_employee(self, data: dict[str, Any]) -> dict[str, Any]:
        fields = {
            "company_id": require_positive_id(data.get("company_id"), "Company"),
            "department_id": _optional_id(data.get("department_id"), "Department"),
            "position_id": _optional_id(data.get("position_id"), "Position"),
            "shift_id": _optional_id(data.get("shift_id"), "Work shift"),
            "full_name": require_non_empty(data.get("full_name"), "Full name"),
            "email": require_email(data.get("email")),
            "phone_number": optional_text(data.get("phone_number")),
            "gender": _parse_gender(data.get("gender")),
            "birth_date": _optional_date(data.get("birth_date")),
            "hire_date": _optional_date(data.get("hire_date")),
        }
        if "termination_date" in data:
            fields["termination_date"] = _optional_date(data.get("termination_date"))
        return fields

    def _ensure_unique_email(self, email: str, *, employee_id: int = 0) -> None:
        existing = self._employees.find_by_email(email)
        if existing and existing.employee_id != employee_id:
            raise ConflictError("Email is already used by another employee")

    def get_employee(self, employee_id: int, *, today: date, include_deleted: bool = False) -> EmployeeProfile:
        employee = self._employees.get_by_id(int(employee_id), include_deleted=include_deleted)
        if not employee:
            raise NotFoundError("Employee not found")

        contract = self._employees.get_active_contract(employee.employee_id, on=today)
        user = self._users.get_by_employee_id(employee.employee_id)
        return EmployeeProfile(
            employee=employee,
            status=derive_status(employee, contract, on=today),
            contract=contract,
            personnel=self._employees.get_personnel_details(employee.employee_id),
            educations=tuple(self._employees.list_educations(employee.employee_id)),
            username=user.username if user else None,
        )

    def list_employees(self, *, company_id: Optional[int] = None, include_deleted: bool = False) -> Sequence[Employee]:
        return self._employees.list_all(company_id=company_id, include_deleted=include_deleted)

    def create_employee_with_user(self, data: dict[str, Any], *, today: date) -> CreatedEmployee:
        """Onboard an employee in one transaction.

        Inserts the employee, then optionally the first contract, a login
        account with a generated temporary password, personnel details and
        education rows. Any failure rolls all of it back.
        """

        fields = self._parse_employee(data)
        self._ensure_unique_email(fields["email"])

        contract = None
        if data.get("contract_type") and data.get("salary_base") not in (None, ""):
            try:
                contract_type = ContractType(data["contract_type"])
            except ValueError:
                raise ValidationError("Contract type must be Probation, Contract or Permanent")
            salary_base = require_number(data.get("salary_base"), "Base salary")
            if salary_base <= 0:
                raise ValidationError("Base salary must be greater than 0")
            contract = {
                "contract_type": contract_type.value,
                "start_date": fields["hire_date"] or today,
                "end_date": _optional_date(data.get("contract_end_date")),
                "salary_base": salary_base,
            }

        username = None
        account = None
        if data.get("create_user_account"):
            username = require_min_length(require_non_empty(data.get("username"), "Username"), "Username", 3)
            if self._users.get_by_username(username):
                raise ConflictError("Username is already taken")
            try:
                access_role = Role(str(data.get("access_role") or Role.STAFF.value).lower())
            except ValueError:
                raise ValidationError("Access role must be admin or staff")
            account = {"role": access_role, "role_id": _optional_id(data.get("role_id"), "Role")}

        educations = [_parse_education(e) for e in data.get("education_data") or []]
        personnel = data.get("personnel_details") or None

        temp_password = None
        with self._tx.transaction():
            employee_id = self._employees.create(fields)

            if contract:
                self._employees.create_contract(employee_id=employee_id, **contract)

            if account:
                temp_password = generate_temporary_password()
                self._users.create_user(
                    employee_id=employee_id,
                    username=username,
                    password_hash=generate_password_hash(temp_password),
                    **account,
                )

            if personnel:
                self._employees.upsert_personnel_details(
                    PersonnelDetails(
                        employee_id=employee_id,
                        **{f: optional_text(personnel.get(f)) for f in PERSONNEL_FIELDS},
                    )
                )

            for education in educations:
                self._employees.create_education(employee_id=employee_id, **education)

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        logger.info("Employee %s created (user account: %s)", employee_id, username or "none")
        return CreatedEmployee(employee=employee, username=username, temp_password=temp_password)

    def update_employee(self, employee_id: int, data: dict[str, Any], *, now: datetime) -> Employee:
        fields = self._parse_employee(data)
        self._ensure_unique_email(fields["email"], employee_id=int(employee_id))

        if not self._employees.update(int(employee_id), fields, updated_at=now):
            raise NotFoundError("Employee not found")

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        logger.info("Employee %s updated", employee_id)
        return employee

    def update_personnel_details(self, employee_id: int, data: dict[str, Any]) -> PersonnelDetails:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")
        details = PersonnelDetails(
            employee_id=int(employee_id),
            **{f: optional_text(data.get(f)) for f in PERSONNEL_FIELDS},
        )
        self._employees.upsert_personnel_details(details)
        return details

    def soft_delete_employee(self, employee_id: int, *, now: datetime) -> None:
        if not self._employees.soft_delete(int(employee_id), deleted_at=now):
            raise NotFoundError("Employee not found")
        logger.info("Employee %s archived", employee_id)

    def restore_employee(self, employee_id: int) -> None:
        if not self._employees.restore(int(employee_id)):
            raise NotFoundError("Archived employee not found")
        logger.info("Employee %s restored", employee_id)

    # Educations
    def list_educations(self, employee_id: int) -> Sequence[Education]:
        return self._employees.list_educations(int(employee_id))

    def add_education(self, employee_id: int, data: dict[str, Any]) -> int:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")
        return self._employees.create_education(employee_id=int(employee_id), **_parse_education(data))

    def update_education(self, education_id: int, data: dict[str, Any]) -> None:
        if not self._employees.update_education(education_id=int(education_id), **_parse_education(data)):
            raise NotFoundError("Education record not found")

    def delete_education(self, education_id: int, *, now: datetime) -> None:
        if not self._employees.delete_education(int(education_id), deleted_at=now):
            raise NotFoundError("Education record not found")
