from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login account bound to at most one employee.

    Plain data object; no DB access here.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    employee_id: Optional[int] = None
    role_id: Optional[int] = None
    is_active: bool = True
    full_name: Optional[str] = None
    company_id: Optional[int] = None
