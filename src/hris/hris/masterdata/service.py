from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.validators import optional_text, require_email, require_non_empty, require_number, require_positive_id
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import Transactional
from ..shifts.repository import ShiftRepository
from ..users.repository import UserRepository
from .model import Company, Department, Position, PositionLevel, RoleDefinition
from .repository import MasterRepository

logger = logging.getLogger(__name__)


class MasterDataService:
    """Companies, departments, position levels, positions and roles.

    Deletes are soft and cascade down the hierarchy
    company -> departments -> positions -> work shifts inside one transaction.
    """

    def __init__(
        self,
        *,
        companies: MasterRepository[Company],
        departments: MasterRepository[Department],
        levels: MasterRepository[PositionLevel],
        positions: MasterRepository[Position],
        roles: MasterRepository[RoleDefinition],
        shifts: ShiftRepository,
        users: UserRepository,
        tx: Transactional,
    ):
        self._companies = companies
        self._departments = departments
        self._levels = levels
        self._positions = positions
        self._roles = roles
        self._shifts = shifts
        self._users = users
        self._tx = tx

    @staticmethod
    def _save(repo: MasterRepository, data: dict[str, Any], fields: dict[str, Any], *, now: datetime, label: str) -> Any:
        row_id = int(data.get("id") or 0)
        if row_id:
            if not repo.update(row_id, fields, updated_at=now):
                raise NotFoundError(f"{label} not found")
        else:
            row_id = repo.create(fields)

        saved = repo.get_by_id(row_id)
        if not saved:
            raise NotFoundError(f"{label} not found")
        logger.info("%s %s saved", label, row_id)
        return saved

    # Companies
    def list_companies(self) -> Sequence[Company]:
        return self._companies.list_all()

    def upsert_company(self, data: dict[str, Any], *, now: datetime) -> Company:
        email = optional_text(data.get("email"))
        fields = {
            "name": require_non_empty(data.get("name"), "Company name"),
            "code": require_non_empty(data.get("code"), "Company code").upper(),
            "address": optional_text(data.get("address")),
            "phone": optional_text(data.get("phone")),
            "email": require_email(email) if email else None,
        }
        return self._save(self._companies, data, fields, now=now, label="Company")

    def delete_company(self, company_id: int, *, now: datetime) -> None:
        with self._tx.transaction():
            if not self._companies.soft_delete(int(company_id), deleted_at=now):
                raise NotFoundError("Company not found")
            department_ids = self._departments.ids_for_parents([int(company_id)])
            self._departments.soft_delete_for_parents([int(company_id)], deleted_at=now)
            self._cascade_positions(department_ids, now=now)
        logger.info("Company %s deleted with %d departments", company_id, len(department_ids))

    # Departments
    def list_departments(self, *, company_id: Optional[int] = None) -> Sequence[Department]:
        return self._departments.list_all(parent_id=company_id)

    def upsert_department(self, data: dict[str, Any], *, now: datetime) -> Department:
        company_id = require_positive_id(data.get("company_id"), "Company")
        if not self._companies.get_by_id(company_id):
            raise NotFoundError("Company not found")
        fields = {
            "company_id": company_id,
            "name": require_non_empty(data.get("name"), "Department name"),
            "description": optional_text(data.get("description")),
        }
        return self._save(self._departments, data, fields, now=now, label="Department")

    def delete_department(self, department_id: int, *, now: datetime) -> None:
        with self._tx.transaction():
            if not self._departments.soft_delete(int(department_id), deleted_at=now):
                raise NotFoundError("Department not found")
            self._cascade_positions([int(department_id)], now=now)

    def _cascade_positions(self, department_ids: Sequence[int], *, now: datetime) -> None:
        if not department_ids:
            return
        position_ids = self._positions.ids_for_parents(department_ids)
        self._positions.soft_delete_for_parents(department_ids, deleted_at=now)
        self._shifts.soft_delete_for_positions(position_ids, deleted_at=now)

    # Position levels
    def list_position_levels(self) -> Sequence[PositionLevel]:
        return self._levels.list_all()

    def upsert_position_level(self, data: dict[str, Any], *, now: datetime) -> PositionLevel:
        rank = data.get("rank_order")
        fields = {
            "name": require_non_empty(data.get("name"), "Level name"),
            "rank_order": int(require_number(rank, "Rank order")) if rank not in (None, "") else 0,
        }
        return self._save(self._levels, data, fields, now=now, label="Position level")

    def delete_position_level(self, level_id: int, *, now: datetime) -> None:
        if not self._levels.soft_delete(int(level_id), deleted_at=now):
            raise NotFoundError("Position level not found")

    # Positions
    def list_positions(self, *, department_id: Optional[int] = None) -> Sequence[Position]:
        return self._positions.list_all(parent_id=department_id)

    def upsert_position(self, data: dict[str, Any], *, now: datetime) -> Position:
        department_id = require_positive_id(data.get("department_id"), "Department")
        if not self._departments.get_by_id(department_id):
            raise NotFoundError("Department not found")

        level_id = data.get("level_id")
        if level_id not in (None, "", 0, "0"):
            level_id = require_positive_id(level_id, "Position level")
            if not self._levels.get_by_id(level_id):
                raise NotFoundError("Position level not found")
        else:
            level_id = None

        fields = {
            "department_id": department_id,
            "level_id": level_id,
            "name": require_non_empty(data.get("name"), "Position name"),
            "description": optional_text(data.get("description")),
        }
        return self._save(self._positions, data, fields, now=now, label="Position")

    def delete_position(self, position_id: int, *, now: datetime) -> None:
        with self._tx.transaction():
            if not self._positions.soft_delete(int(position_id), deleted_at=now):
                raise NotFoundError("Position not found")
            self._shifts.soft_delete_for_positions([int(position_id)], deleted_at=now)

    # Roles
    def list_roles(self) -> Sequence[RoleDefinition]:
        return self._roles.list_all()

    def upsert_role(self, data: dict[str, Any], *, now: datetime) -> RoleDefinition:
        name = require_non_empty(data.get("name"), "Role name")
        existing = self._roles.find_by_name(name)
        if existing and existing.role_id != int(data.get("id") or 0):
            raise ConflictError("Role name is already in use")

        fields = {"name": name, "description": optional_text(data.get("description"))}
        return self._save(self._roles, data, fields, now=now, label="Role")

    def delete_role(self, role_id: int, *, now: datetime) -> None:
        if self._users.count_with_role_id(int(role_id)) > 0:
            raise ConflictError("Role cannot be deleted because users still have it")
        if not self._roles.soft_delete(int(role_id), deleted_at=now):
            raise NotFoundError("Role not found")
