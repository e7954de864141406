from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyCheckedInError
from ..database.mysql_base import MySQLRepository, fetchall, fetchone, to_float
from .model import AttendanceRecord, AttendanceRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    a.id, a.employee_id, a.work_date, a.check_in, a.check_out, a.status,
    a.is_late, a.late_minutes, a.working_hours, a.overtime_hours,
    a.shift_id, a.location_id, a.wifi_id, a.notes
"""


class MySQLAttendanceRepository(MySQLRepository, AttendanceRepository):
    table = "attendances"
    alias = "a"

    def _to_model(self, r: dict) -> AttendanceRecord:
        return AttendanceRecord(
            attendance_id=int(r["id"]),
            employee_id=int(r["employee_id"]),
            work_date=r["work_date"],
            check_in=r["check_in"],
            check_out=r.get("check_out"),
            status=AttendanceStatus(r["status"]),
            is_late=bool(r.get("is_late")),
            late_minutes=int(r.get("late_minutes") or 0),
            working_hours=to_float(r.get("working_hours")),
            overtime_hours=to_float(r.get("overtime_hours")),
            shift_id=r.get("shift_id"),
            location_id=r.get("location_id"),
            wifi_id=r.get("wifi_id"),
            notes=r.get("notes"),
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendances a WHERE {self._active('a.id=%s')}",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendances a
                WHERE {self._active('a.employee_id=%s', 'a.work_date=%s')}
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendances a
                WHERE {self._active('a.employee_id=%s')}
                ORDER BY a.work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def create_check_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
        is_late: bool,
        late_minutes: int,
        shift_id: Optional[int] = None,
        location_id: Optional[int] = None,
        wifi_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        try:
            with self._cursor() as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendances(employee_id, work_date, check_in, status, is_late,
                                            late_minutes, shift_id, location_id, wifi_id, notes)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        work_date,
                        check_in,
                        status.value,
                        int(is_late),
                        int(late_minutes),
                        shift_id,
                        location_id,
                        wifi_id,
                        notes,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise AlreadyCheckedInError("You have already checked in today") from e
            raise

    def complete_check_out(
        self,
        *,
        attendance_id: int,
        check_out: datetime,
        working_hours: float,
        overtime_hours: float,
        notes: Optional[str] = None,
    ) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                UPDATE attendances
                SET check_out=%s, working_hours=%s, overtime_hours=%s, notes=COALESCE(%s, notes)
                WHERE id=%s AND check_out IS NULL AND deleted_at IS NULL
                """,
                (check_out, working_hours, overtime_hours, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_rows(
        self,
        *,
        company_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRow]:
        clauses = ["e.company_id=%s", "a.work_date BETWEEN %s AND %s", "e.deleted_at IS NULL"]
        params: list[object] = [int(company_id), start_date, end_date]
        if employee_id is not None:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))

        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.id, a.employee_id, a.work_date, a.check_in, a.check_out, a.status,
                    a.is_late, a.late_minutes, a.working_hours, a.overtime_hours, a.notes,
                    e.full_name,
                    d.name AS department_name,
                    p.name AS position_name,
                    ws.name AS shift_name,
                    l.name AS location_name,
                    w.ssid_name AS wifi_ssid
                FROM attendances a
                JOIN employees e ON e.id = a.employee_id
                LEFT JOIN departments d ON d.id = e.department_id
                LEFT JOIN positions p ON p.id = e.position_id
                LEFT JOIN work_shifts ws ON ws.id = a.shift_id
                LEFT JOIN locations l ON l.id = a.location_id
                LEFT JOIN location_wifi w ON w.id = a.wifi_id
                WHERE {self._active(*clauses)}
                ORDER BY a.work_date ASC, a.check_in ASC
                """,
                tuple(params),
            )
            return [
                AttendanceRow(
                    attendance_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    full_name=r["full_name"],
                    work_date=r["work_date"],
                    check_in=r["check_in"],
                    check_out=r.get("check_out"),
                    status=AttendanceStatus(r["status"]),
                    is_late=bool(r.get("is_late")),
                    late_minutes=int(r.get("late_minutes") or 0),
                    working_hours=to_float(r.get("working_hours")),
                    overtime_hours=to_float(r.get("overtime_hours")),
                    department_name=r.get("department_name"),
                    position_name=r.get("position_name"),
                    shift_name=r.get("shift_name"),
                    location_name=r.get("location_name"),
                    wifi_ssid=r.get("wifi_ssid"),
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]
