from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Company:
    company_id: int
    name: str
    code: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class Department:
    department_id: int
    company_id: int
    name: str
    description: Optional[str] = None
    company_name: Optional[str] = None


@dataclass(frozen=True)
class PositionLevel:
    level_id: int
    name: str
    rank_order: int = 0


@dataclass(frozen=True)
class Position:
    position_id: int
    department_id: int
    name: str
    level_id: Optional[int] = None
    description: Optional[str] = None
    department_name: Optional[str] = None
    level_name: Optional[str] = None


@dataclass(frozen=True)
class RoleDefinition:
    """Descriptive role from the roles table (access is decided by ``users.role``)."""

    role_id: int
    name: str
    description: Optional[str] = None
