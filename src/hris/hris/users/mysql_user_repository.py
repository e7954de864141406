from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.mysql_base import MySQLRepository, fetchone
from .model import User
from .repository import UserRepository

_SELECT = """
    SELECT u.id, u.employee_id, u.username, u.password_hash, u.role, u.role_id, u.is_active,
           e.full_name, e.company_id
    FROM users u
    LEFT JOIN employees e ON e.id = u.employee_id
"""


class MySQLUserRepository(MySQLRepository, UserRepository):
    table = "users"
    alias = "u"

    def _to_model(self, row: dict) -> User:
        return User(
            user_id=int(row["id"]),
            username=row["username"],
            password_hash=row["password_hash"],
            role=Role(row["role"]),
            employee_id=row.get("employee_id"),
            role_id=row.get("role_id"),
            is_active=bool(row.get("is_active", True)),
            full_name=row.get("full_name"),
            company_id=row.get("company_id"),
        )

    def _get_one(self, where: str, params: tuple) -> Optional[User]:
        with self._cursor() as (_, cur):
            cur.execute(f"{_SELECT} WHERE {self._active(where)}", params)
            row = fetchone(cur)
            return self._to_model(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("u.id=%s", (int(user_id),))

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("u.username=%s", (username,))

    def get_by_employee_id(self, employee_id: int) -> Optional[User]:
        return self._get_one("u.employee_id=%s", (int(employee_id),))

    def create_user(
        self,
        *,
        employee_id: Optional[int],
        username: str,
        password_hash: str,
        role: Role,
        role_id: Optional[int] = None,
    ) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO users(employee_id, username, password_hash, role, role_id, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (employee_id, username, password_hash, role.value, role_id),
            )
            return int(cur.lastrowid)

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with self._cursor() as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE id=%s", (int(is_active), int(user_id)))
            return cur.rowcount > 0

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        with self._cursor() as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def count_with_role_id(self, role_id: int) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM users WHERE role_id=%s AND deleted_at IS NULL",
                (int(role_id),),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0
