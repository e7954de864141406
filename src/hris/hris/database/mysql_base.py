from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    shared = conn_factory.current
    if shared is not None:
        # Commit/rollback belong to the enclosing transaction.
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def to_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """DECIMAL/DOUBLE columns come back as Decimal or float; callers want float."""
    if value is None:
        return default
    if isinstance(value, Decimal):
        return float(value)
    return float(value)


class MySQLRepository:
    """Base for tables following the soft-delete convention.

    Every read goes through ``_active()`` which prepends
    ``deleted_at IS NULL`` unless the caller asks for deleted rows.
    """

    table: str = ""
    alias: str = ""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _cursor(self):
        return db_cursor(self._conn_factory)

    def _col(self, name: str) -> str:
        return f"{self.alias}.{name}" if self.alias else name

    def _active(self, *clauses: str, include_deleted: bool = False) -> str:
        parts = [] if include_deleted else [f"{self._col('deleted_at')} IS NULL"]
        parts.extend(c for c in clauses if c)
        return " AND ".join(parts) if parts else "1=1"

    def _soft_delete_where(self, where: str, params: tuple, *, deleted_at: datetime) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                f"UPDATE {self.table} SET deleted_at=%s WHERE deleted_at IS NULL AND {where}",
                (deleted_at, *params),
            )
            return int(cur.rowcount)

    def soft_delete(self, row_id: int, *, deleted_at: datetime) -> bool:
        return self._soft_delete_where("id=%s", (int(row_id),), deleted_at=deleted_at) > 0
