from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import ScheduleRow, ShiftSchedule
from .repository import ScheduleRepository


class MySQLScheduleRepository(MySQLRepository, ScheduleRepository):
    table = "employee_shift_schedules"
    alias = "sc"

    def _to_model(self, r: dict) -> ShiftSchedule:
        return ShiftSchedule(
            schedule_id=int(r["id"]),
            employee_id=int(r["employee_id"]),
            work_date=r["date"],
            shift_id=int(r["shift_id"]),
            notes=r.get("notes"),
        )

    def get_by_id(self, schedule_id: int) -> Optional[ShiftSchedule]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT sc.id, sc.employee_id, sc.date, sc.shift_id, sc.notes
                FROM employee_shift_schedules sc
                WHERE {self._active('sc.id=%s')}
                """,
                (int(schedule_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[ShiftSchedule]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT sc.id, sc.employee_id, sc.date, sc.shift_id, sc.notes
                FROM employee_shift_schedules sc
                WHERE {self._active('sc.employee_id=%s', 'sc.date=%s')}
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def upsert(self, *, employee_id: int, work_date: date, shift_id: int, notes: Optional[str] = None) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_shift_schedules(employee_id, date, shift_id, notes)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE shift_id=VALUES(shift_id), notes=VALUES(notes), deleted_at=NULL
                """,
                (int(employee_id), work_date, int(shift_id), notes),
            )

            # If it was an update, lastrowid can be 0; fetch the id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT id FROM employee_shift_schedules WHERE employee_id=%s AND date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return int(r["id"]) if r else 0

    def list_range(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[ScheduleRow]:
        clauses = ["sc.date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("sc.employee_id=%s")
            params.append(int(employee_id))

        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT
                    sc.id,
                    sc.date,
                    sc.notes,
                    e.id AS employee_id,
                    e.full_name,
                    ws.id AS shift_id,
                    ws.name AS shift_name,
                    ws.start_time,
                    ws.end_time
                FROM employee_shift_schedules sc
                JOIN employees e ON e.id = sc.employee_id
                JOIN work_shifts ws ON ws.id = sc.shift_id
                WHERE {self._active(*clauses)}
                ORDER BY sc.date ASC, e.id ASC
                """,
                tuple(params),
            )
            return [
                ScheduleRow(
                    schedule_id=int(r["id"]),
                    work_date=r["date"],
                    employee_id=int(r["employee_id"]),
                    full_name=r["full_name"],
                    shift_id=int(r["shift_id"]),
                    shift_name=r["shift_name"],
                    start_time=str(r["start_time"])[:5],
                    end_time=str(r["end_time"])[:5],
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]
