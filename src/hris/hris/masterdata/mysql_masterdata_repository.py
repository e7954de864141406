from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..database.mysql_base import MySQLRepository, fetchall
from .model import Company, Department, Position, PositionLevel, RoleDefinition


class MySQLMasterRepository(MySQLRepository):
    """Table-driven CRUD for master data.

    Subclasses declare the writable ``columns``, the optional
    ``parent_column`` and how a row maps to its model.
    """

    columns: tuple[str, ...] = ()
    parent_column: Optional[str] = None
    order_by: str = "name"
    joins: str = ""
    extra_select: str = ""

    def _to_model(self, r: dict) -> Any:
        raise NotImplementedError

    def _select(self, where: str, params: tuple) -> list[Any]:
        a = self.alias
        extra = f", {self.extra_select}" if self.extra_select else ""
        with self._cursor() as (_, cur):
            cur.execute(
                f"SELECT {a}.*{extra} FROM {self.table} {a} {self.joins} "
                f"WHERE {where} ORDER BY {a}.{self.order_by}, {a}.id",
                params,
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def list_all(self, *, parent_id: Optional[int] = None) -> Sequence[Any]:
        if parent_id and self.parent_column:
            return self._select(self._active(self._col(f"{self.parent_column}=%s")), (int(parent_id),))
        return self._select(self._active(), ())

    def get_by_id(self, row_id: int) -> Optional[Any]:
        found = self._select(self._active(self._col("id=%s")), (int(row_id),))
        return found[0] if found else None

    def find_by_name(self, name: str, *, parent_id: Optional[int] = None) -> Optional[Any]:
        clauses = [self._col("name=%s")]
        params: list[object] = [name]
        if parent_id and self.parent_column:
            clauses.append(self._col(f"{self.parent_column}=%s"))
            params.append(int(parent_id))
        found = self._select(self._active(*clauses), tuple(params))
        return found[0] if found else None

    def create(self, fields: dict[str, Any]) -> int:
        cols = [c for c in self.columns if c in fields]
        with self._cursor() as (_, cur):
            cur.execute(
                f"INSERT INTO {self.table}({', '.join(cols)}) VALUES({', '.join(['%s'] * len(cols))})",
                tuple(fields[c] for c in cols),
            )
            return int(cur.lastrowid)

    def update(self, row_id: int, fields: dict[str, Any], *, updated_at: datetime) -> bool:
        cols = [c for c in self.columns if c in fields]
        assignments = ", ".join(f"{c}=%s" for c in cols + ["updated_at"])
        with self._cursor() as (_, cur):
            cur.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id=%s AND deleted_at IS NULL",
                (*[fields[c] for c in cols], updated_at, int(row_id)),
            )
            return cur.rowcount > 0

    def ids_for_parents(self, parent_ids: Sequence[int]) -> list[int]:
        ids = [int(i) for i in parent_ids]
        if not ids or not self.parent_column:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with self._cursor() as (_, cur):
            cur.execute(
                f"SELECT id FROM {self.table} WHERE deleted_at IS NULL AND {self.parent_column} IN ({placeholders})",
                tuple(ids),
            )
            return [int(r["id"]) for r in fetchall(cur)]

    def soft_delete_for_parents(self, parent_ids: Sequence[int], *, deleted_at: datetime) -> int:
        ids = [int(i) for i in parent_ids]
        if not ids or not self.parent_column:
            return 0
        placeholders = ",".join(["%s"] * len(ids))
        return self._soft_delete_where(f"{self.parent_column} IN ({placeholders})", tuple(ids), deleted_at=deleted_at)


class MySQLCompanyRepository(MySQLMasterRepository):
    table = "companies"
    alias = "c"
    columns = ("name", "code", "address", "phone", "email")

    def _to_model(self, r: dict) -> Company:
        return Company(
            company_id=int(r["id"]),
            name=r["name"],
            code=r["code"],
            address=r.get("address"),
            phone=r.get("phone"),
            email=r.get("email"),
        )


class MySQLDepartmentRepository(MySQLMasterRepository):
    table = "departments"
    alias = "d"
    columns = ("company_id", "name", "description")
    parent_column = "company_id"
    joins = "LEFT JOIN companies c ON c.id = d.company_id"
    extra_select = "c.name AS company_name"

    def _to_model(self, r: dict) -> Department:
        return Department(
            department_id=int(r["id"]),
            company_id=int(r["company_id"]),
            name=r["name"],
            description=r.get("description"),
            company_name=r.get("company_name"),
        )


class MySQLPositionLevelRepository(MySQLMasterRepository):
    table = "position_levels"
    alias = "pl"
    columns = ("name", "rank_order")
    order_by = "rank_order"

    def _to_model(self, r: dict) -> PositionLevel:
        return PositionLevel(level_id=int(r["id"]), name=r["name"], rank_order=int(r.get("rank_order") or 0))


class MySQLPositionRepository(MySQLMasterRepository):
    table = "positions"
    alias = "p"
    columns = ("department_id", "level_id", "name", "description")
    parent_column = "department_id"
    joins = "LEFT JOIN departments d ON d.id = p.department_id LEFT JOIN position_levels pl ON pl.id = p.level_id"
    extra_select = "d.name AS department_name, pl.name AS level_name"

    def _to_model(self, r: dict) -> Position:
        return Position(
            position_id=int(r["id"]),
            department_id=int(r["department_id"]),
            name=r["name"],
            level_id=r.get("level_id"),
            description=r.get("description"),
            department_name=r.get("department_name"),
            level_name=r.get("level_name"),
        )


class MySQLRoleRepository(MySQLMasterRepository):
    table = "roles"
    alias = "r"
    columns = ("name", "description")

    def _to_model(self, r: dict) -> RoleDefinition:
        return RoleDefinition(role_id=int(r["id"]), name=r["name"], description=r.get("description"))
