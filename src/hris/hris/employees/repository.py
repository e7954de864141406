from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Protocol, Sequence

from .model import Education, Employee, EmployeeContract, PersonnelDetails


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int, *, include_deleted: bool = False) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self, *, company_id: Optional[int] = None, include_deleted: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

    def find_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def count_active(self, *, company_id: int, on: date) -> int:
        """Employees hired on or before ``on`` and not terminated before it."""

        raise NotImplementedError

    def create(self, fields: dict[str, Any]) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, fields: dict[str, Any], *, updated_at: datetime) -> bool:
        raise NotImplementedError

    def soft_delete(self, employee_id: int, *, deleted_at: datetime) -> bool:
        raise NotImplementedError

    def restore(self, employee_id: int) -> bool:
        raise NotImplementedError

    # Contracts
    def get_active_contract(self, employee_id: int, *, on: date) -> Optional[EmployeeContract]:
        raise NotImplementedError

    def list_contracts(self, employee_id: int) -> Sequence[EmployeeContract]:
        raise NotImplementedError

    def create_contract(
        self,
        *,
        employee_id: int,
        contract_type: str,
        start_date: date,
        end_date: Optional[date],
        salary_base: float,
    ) -> int:
        raise NotImplementedError

    # Personnel details
    def get_personnel_details(self, employee_id: int) -> Optional[PersonnelDetails]:
        raise NotImplementedError

    def upsert_personnel_details(self, details: PersonnelDetails) -> None:
        raise NotImplementedError

    # Educations
    def list_educations(self, employee_id: int) -> Sequence[Education]:
        raise NotImplementedError

    def create_education(
        self,
        *,
        employee_id: int,
        degree: str,
        institution: str,
        major: Optional[str],
        graduation_year: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update_education(
        self,
        *,
        education_id: int,
        degree: str,
        institution: str,
        major: Optional[str],
        graduation_year: Optional[int],
    ) -> bool:
        raise NotImplementedError

    def delete_education(self, education_id: int, *, deleted_at: datetime) -> bool:
        raise NotImplementedError
