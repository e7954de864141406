from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import ContractType, Gender
from ..database.mysql_base import MySQLRepository, fetchall, fetchone, to_float
from .model import Education, Employee, EmployeeContract, PersonnelDetails
from .repository import EmployeeRepository

EMPLOYEE_FIELDS = (
    "company_id",
    "department_id",
    "position_id",
    "shift_id",
    "full_name",
    "email",
    "phone_number",
    "gender",
    "birth_date",
    "hire_date",
    "termination_date",
)

_SELECT = """
    SELECT e.*, d.name AS department_name, p.name AS position_name
    FROM employees e
    LEFT JOIN departments d ON d.id = e.department_id
    LEFT JOIN positions p ON p.id = e.position_id
"""


def _to_contract(r: dict) -> EmployeeContract:
    return EmployeeContract(
        contract_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        contract_type=ContractType(r["contract_type"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        salary_base=to_float(r["salary_base"]),
    )


def _to_education(r: dict) -> Education:
    year = r.get("graduation_year")
    return Education(
        education_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        degree=r["degree"],
        institution=r["institution"],
        major=r.get("major"),
        graduation_year=int(year) if year is not None else None,
    )


class MySQLEmployeeRepository(MySQLRepository, EmployeeRepository):
    table = "employees"
    alias = "e"

    def _to_model(self, r: dict) -> Employee:
        return Employee(
            employee_id=int(r["id"]),
            company_id=int(r["company_id"]),
            full_name=r["full_name"],
            email=r["email"],
            department_id=r.get("department_id"),
            position_id=r.get("position_id"),
            shift_id=r.get("shift_id"),
            phone_number=r.get("phone_number"),
            gender=Gender(r["gender"]) if r.get("gender") else None,
            birth_date=r.get("birth_date"),
            hire_date=r.get("hire_date"),
            termination_date=r.get("termination_date"),
            deleted_at=r.get("deleted_at"),
            department_name=r.get("department_name"),
            position_name=r.get("position_name"),
        )

    def get_by_id(self, employee_id: int, *, include_deleted: bool = False) -> Optional[Employee]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {self._active('e.id=%s', include_deleted=include_deleted)}",
                (int(employee_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def list_all(self, *, company_id: Optional[int] = None, include_deleted: bool = False) -> Sequence[Employee]:
        clauses: list[str] = []
        params: list[object] = []
        if company_id:
            clauses.append("e.company_id=%s")
            params.append(int(company_id))
        with self._cursor() as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {self._active(*clauses, include_deleted=include_deleted)} ORDER BY e.full_name",
                tuple(params),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def find_by_email(self, email: str) -> Optional[Employee]:
        with self._cursor() as (_, cur):
            cur.execute(f"{_SELECT} WHERE {self._active('e.email=%s')}", (email,))
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def count_active(self, *, company_id: int, on: date) -> int:
        where = self._active(
            "e.company_id=%s",
            "(e.hire_date IS NULL OR e.hire_date <= %s)",
            "(e.termination_date IS NULL OR e.termination_date > %s)",
        )
        with self._cursor() as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS n FROM employees e WHERE {where}",
                (int(company_id), on, on),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def create(self, fields: dict[str, Any]) -> int:
        cols = [c for c in EMPLOYEE_FIELDS if c in fields]
        with self._cursor() as (_, cur):
            cur.execute(
                f"INSERT INTO employees({', '.join(cols)}) VALUES({', '.join(['%s'] * len(cols))})",
                tuple(fields[c] for c in cols),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, fields: dict[str, Any], *, updated_at: datetime) -> bool:
        cols = [c for c in EMPLOYEE_FIELDS if c in fields]
        assignments = ", ".join(f"{c}=%s" for c in cols + ["updated_at"])
        with self._cursor() as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE id=%s AND deleted_at IS NULL",
                (*[fields[c] for c in cols], updated_at, int(employee_id)),
            )
            return cur.rowcount > 0

    def restore(self, employee_id: int) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                "UPDATE employees SET deleted_at=NULL WHERE id=%s AND deleted_at IS NOT NULL",
                (int(employee_id),),
            )
            return cur.rowcount > 0

    def get_active_contract(self, employee_id: int, *, on: date) -> Optional[EmployeeContract]:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, contract_type, start_date, end_date, salary_base
                FROM employee_contracts
                WHERE employee_id=%s AND deleted_at IS NULL
                  AND start_date <= %s AND (end_date IS NULL OR end_date >= %s)
                ORDER BY start_date DESC, id DESC
                LIMIT 1
                """,
                (int(employee_id), on, on),
            )
            r = fetchone(cur)
            return _to_contract(r) if r else None

    def list_contracts(self, employee_id: int) -> Sequence[EmployeeContract]:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, contract_type, start_date, end_date, salary_base
                FROM employee_contracts
                WHERE employee_id=%s AND deleted_at IS NULL
                ORDER BY start_date DESC, id DESC
                """,
                (int(employee_id),),
            )
            return [_to_contract(r) for r in fetchall(cur)]

    def create_contract(
        self,
        *,
        employee_id: int,
        contract_type: str,
        start_date: date,
        end_date: Optional[date],
        salary_base: float,
    ) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_contracts(employee_id, contract_type, start_date, end_date, salary_base)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), contract_type, start_date, end_date, salary_base),
            )
            return int(cur.lastrowid)

    def get_personnel_details(self, employee_id: int) -> Optional[PersonnelDetails]:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                SELECT employee_id, religion, marital_status, ptkp_status,
                       ktp_address, domicile_address, npwp_number
                FROM employee_personnel_details
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PersonnelDetails(
                employee_id=int(r["employee_id"]),
                religion=r.get("religion"),
                marital_status=r.get("marital_status"),
                ptkp_status=r.get("ptkp_status"),
                ktp_address=r.get("ktp_address"),
                domicile_address=r.get("domicile_address"),
                npwp_number=r.get("npwp_number"),
            )

    def upsert_personnel_details(self, details: PersonnelDetails) -> None:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_personnel_details(employee_id, religion, marital_status, ptkp_status,
                                                       ktp_address, domicile_address, npwp_number)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    religion=VALUES(religion), marital_status=VALUES(marital_status),
                    ptkp_status=VALUES(ptkp_status), ktp_address=VALUES(ktp_address),
                    domicile_address=VALUES(domicile_address), npwp_number=VALUES(npwp_number)
                """,
                (
                    int(details.employee_id),
                    details.religion,
                    details.marital_status,
                    details.ptkp_status,
                    details.ktp_address,
                    details.domicile_address,
                    details.npwp_number,
                ),
            )

    def list_educations(self, employee_id: int) -> Sequence[Education]:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, degree, institution, major, graduation_year
                FROM employee_educations
                WHERE employee_id=%s AND deleted_at IS NULL
                ORDER BY graduation_year DESC, id DESC
                """,
                (int(employee_id),),
            )
            return [_to_education(r) for r in fetchall(cur)]

    def create_education(
        self,
        *,
        employee_id: int,
        degree: str,
        institution: str,
        major: Optional[str],
        graduation_year: Optional[int],
    ) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_educations(employee_id, degree, institution, major, graduation_year)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), degree, institution, major, graduation_year),
            )
            return int(cur.lastrowid)

    def update_education(
        self,
        *,
        education_id: int,
        degree: str,
        institution: str,
        major: Optional[str],
        graduation_year: Optional[int],
    ) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                UPDATE employee_educations
                SET degree=%s, institution=%s, major=%s, graduation_year=%s
                WHERE id=%s AND deleted_at IS NULL
                """,
                (degree, institution, major, graduation_year, int(education_id)),
            )
            return cur.rowcount > 0

    def delete_education(self, education_id: int, *, deleted_at: datetime) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                "UPDATE employee_educations SET deleted_at=%s WHERE id=%s AND deleted_at IS NULL",
                (deleted_at, int(education_id)),
            )
            return cur.rowcount > 0
