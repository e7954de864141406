from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import ReportType
from ..database.mysql_base import MySQLRepository, fetchall, fetchone, to_float
from .model import AttendanceReport, ReportTotals
from .repository import ReportRepository

_COLUMNS = """
    id, company_id, report_type, report_date, start_date, end_date,
    total_employees, total_present, total_late, total_absent, total_leave,
    total_overtime_hours, report_data, created_at
"""


class MySQLReportRepository(MySQLRepository, ReportRepository):
    table = "attendance_reports"

    def _to_model(self, r: dict) -> AttendanceReport:
        data = r.get("report_data") or {}
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8")
        if isinstance(data, str):
            data = json.loads(data)

        return AttendanceReport(
            report_id=int(r["id"]),
            company_id=int(r["company_id"]),
            report_type=ReportType(r["report_type"]),
            report_date=r["report_date"],
            start_date=r["start_date"],
            end_date=r["end_date"],
            totals=ReportTotals(
                total_employees=int(r.get("total_employees") or 0),
                total_present=int(r.get("total_present") or 0),
                total_late=int(r.get("total_late") or 0),
                total_absent=int(r.get("total_absent") or 0),
                total_leave=int(r.get("total_leave") or 0),
                total_overtime_hours=to_float(r.get("total_overtime_hours")),
            ),
            report_data=data,
            created_at=r.get("created_at"),
        )

    def create(self, report: AttendanceReport) -> int:
        t = report.totals
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_reports(company_id, report_type, report_date, start_date, end_date,
                                               total_employees, total_present, total_late, total_absent,
                                               total_leave, total_overtime_hours, report_data)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(report.company_id),
                    report.report_type.value,
                    report.report_date,
                    report.start_date,
                    report.end_date,
                    t.total_employees,
                    t.total_present,
                    t.total_late,
                    t.total_absent,
                    t.total_leave,
                    t.total_overtime_hours,
                    json.dumps(report.report_data),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, report_id: int) -> Optional[AttendanceReport]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_reports WHERE {self._active('id=%s')}",
                (int(report_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def list_for_company(
        self,
        *,
        company_id: int,
        report_type: Optional[ReportType] = None,
        limit: int = 10,
    ) -> Sequence[AttendanceReport]:
        clauses = ["company_id=%s"]
        params: list[object] = [int(company_id)]
        if report_type:
            clauses.append("report_type=%s")
            params.append(report_type.value)
        params.append(int(limit))

        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_reports
                WHERE {self._active(*clauses)}
                ORDER BY report_date DESC, id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [self._to_model(r) for r in fetchall(cur)]
