from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Sequence

from ..database.mysql_base import MySQLRepository, fetchall, fetchone, normalize_mysql_time, to_float
from .model import WorkShift
from .repository import ShiftRepository

_SELECT = """
    SELECT ws.id, ws.position_id, ws.name, ws.start_time, ws.end_time,
           ws.duration_hours, ws.tolerance_minutes, ws.is_regular,
           p.name AS position_name
    FROM work_shifts ws
    LEFT JOIN positions p ON p.id = ws.position_id
"""


class MySQLShiftRepository(MySQLRepository, ShiftRepository):
    table = "work_shifts"
    alias = "ws"

    def _to_model(self, r: dict) -> WorkShift:
        return WorkShift(
            shift_id=int(r["id"]),
            position_id=int(r["position_id"]),
            name=r["name"],
            start_time=normalize_mysql_time(r["start_time"]),
            end_time=normalize_mysql_time(r["end_time"]),
            duration_hours=to_float(r["duration_hours"]),
            tolerance_minutes=int(r.get("tolerance_minutes") or 0),
            is_regular=bool(r.get("is_regular")),
            position_name=r.get("position_name"),
        )

    def _query(self, where: str, params: tuple, *, limit: Optional[int] = None) -> list[WorkShift]:
        sql = f"{_SELECT} WHERE {where} ORDER BY ws.start_time, ws.id"
        if limit:
            sql += f" LIMIT {int(limit)}"
        with self._cursor() as (_, cur):
            cur.execute(sql, params)
            return [self._to_model(r) for r in fetchall(cur)]

    def list_all(self, *, position_id: Optional[int] = None) -> Sequence[WorkShift]:
        if position_id:
            return self._query(self._active("ws.position_id=%s"), (int(position_id),))
        return self._query(self._active(), ())

    def get_by_id(self, shift_id: int) -> Optional[WorkShift]:
        found = self._query(self._active("ws.id=%s"), (int(shift_id),))
        return found[0] if found else None

    def first_for_position(self, position_id: int) -> Optional[WorkShift]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {self._active('ws.position_id=%s')} ORDER BY ws.id LIMIT 1",
                (int(position_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def find_by_name(self, *, position_id: int, name: str) -> Optional[WorkShift]:
        found = self._query(self._active("ws.position_id=%s", "ws.name=%s"), (int(position_id), name))
        return found[0] if found else None

    def create(
        self,
        *,
        position_id: int,
        name: str,
        start_time: time,
        end_time: time,
        duration_hours: float,
        tolerance_minutes: int,
        is_regular: bool,
    ) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO work_shifts(position_id, name, start_time, end_time,
                                        duration_hours, tolerance_minutes, is_regular)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(position_id), name, start_time, end_time, duration_hours, int(tolerance_minutes), int(is_regular)),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        shift_id: int,
        position_id: int,
        name: str,
        start_time: time,
        end_time: time,
        duration_hours: float,
        tolerance_minutes: int,
        is_regular: bool,
        updated_at: datetime,
    ) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                UPDATE work_shifts
                SET position_id=%s, name=%s, start_time=%s, end_time=%s, duration_hours=%s,
                    tolerance_minutes=%s, is_regular=%s, updated_at=%s
                WHERE id=%s AND deleted_at IS NULL
                """,
                (
                    int(position_id),
                    name,
                    start_time,
                    end_time,
                    duration_hours,
                    int(tolerance_minutes),
                    int(is_regular),
                    updated_at,
                    int(shift_id),
                ),
            )
            return cur.rowcount > 0

    def soft_delete_for_positions(self, position_ids: Sequence[int], *, deleted_at: datetime) -> int:
        ids = [int(i) for i in position_ids]
        if not ids:
            return 0
        placeholders = ",".join(["%s"] * len(ids))
        return self._soft_delete_where(f"position_id IN ({placeholders})", tuple(ids), deleted_at=deleted_at)

    def count_attendances(self, shift_id: int) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM attendances WHERE shift_id=%s AND deleted_at IS NULL",
                (int(shift_id),),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
