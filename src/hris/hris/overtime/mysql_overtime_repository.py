from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import OvertimeStatus
from ..database.mysql_base import MySQLRepository, fetchall, to_float
from .model import OvertimeFilter, OvertimeRecord
from .repository import OvertimeRepository


class MySQLOvertimeRepository(MySQLRepository, OvertimeRepository):
    table = "overtime_records"
    alias = "o"

    def _to_model(self, r: dict) -> OvertimeRecord:
        return OvertimeRecord(
            overtime_id=int(r["id"]),
            employee_id=int(r["employee_id"]),
            overtime_date=r["overtime_date"],
            start_time=r["start_time"],
            end_time=r["end_time"],
            duration_hours=to_float(r["duration_hours"]),
            multiplier=to_float(r["multiplier"]),
            status=OvertimeStatus(r["status"]),
            attendance_id=r.get("attendance_id"),
            total_compensation=to_float(r.get("total_compensation"), None),
            reason=r.get("reason"),
            approver_id=r.get("approver_id"),
            approved_at=r.get("approved_at"),
            notes=r.get("notes"),
            employee_name=r.get("employee_name"),
            approver_name=r.get("approver_name"),
        )

    def _select(self, where: str, params: tuple) -> list[OvertimeRecord]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT o.*, e.full_name AS employee_name, ap.full_name AS approver_name
                FROM overtime_records o
                JOIN employees e ON e.id = o.employee_id
                LEFT JOIN employees ap ON ap.id = o.approver_id
                WHERE {where}
                ORDER BY o.overtime_date DESC, o.id DESC
                """,
                params,
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def get_by_id(self, overtime_id: int) -> Optional[OvertimeRecord]:
        found = self._select(self._active("o.id=%s"), (int(overtime_id),))
        return found[0] if found else None

    def search(self, filters: OvertimeFilter) -> Sequence[OvertimeRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if filters.employee_id:
            clauses.append("o.employee_id=%s")
            params.append(int(filters.employee_id))
        if filters.status:
            clauses.append("o.status=%s")
            params.append(filters.status.value)
        if filters.start_date:
            clauses.append("o.overtime_date >= %s")
            params.append(filters.start_date)
        if filters.end_date:
            clauses.append("o.overtime_date <= %s")
            params.append(filters.end_date)
        return self._select(self._active(*clauses), tuple(params))

    def create_pending(
        self,
        *,
        employee_id: int,
        attendance_id: Optional[int],
        overtime_date: date,
        start_time: datetime,
        end_time: datetime,
        duration_hours: float,
        multiplier: float,
        reason: Optional[str] = None,
    ) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_records(employee_id, attendance_id, overtime_date, start_time, end_time,
                                             duration_hours, multiplier, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    attendance_id,
                    overtime_date,
                    start_time,
                    end_time,
                    duration_hours,
                    multiplier,
                    reason,
                    OvertimeStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        *,
        overtime_id: int,
        status: OvertimeStatus,
        approver_id: int,
        approved_at: datetime,
        notes: Optional[str],
        total_compensation: Optional[float],
    ) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                UPDATE overtime_records
                SET status=%s, approver_id=%s, approved_at=%s, notes=%s,
                    total_compensation=%s, updated_at=%s
                WHERE id=%s AND status=%s AND deleted_at IS NULL
                """,
                (
                    status.value,
                    int(approver_id),
                    approved_at,
                    notes,
                    total_compensation,
                    approved_at,
                    int(overtime_id),
                    OvertimeStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
