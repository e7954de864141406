from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..attendance.model import AttendanceRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import iter_dates
from ..common.results import to_jsonable
from ..core.constants import DEFAULT_REPORT_LIMIT
from ..core.enums import AttendanceStatus, ReportType
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from .model import AttendanceReport, ReportTotals
from .repository import ReportRepository

logger = logging.getLogger(__name__)


def _hhmm(hours: float) -> str:
    minutes = int(round(hours * 60))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_report_type(value: Any) -> ReportType:
    try:
        return value if isinstance(value, ReportType) else ReportType(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError("Report type must be daily, weekly or monthly")


def summarize(rows: Sequence[AttendanceRow], *, total_employees: int, days: int) -> ReportTotals:
    """Aggregate attendance rows.

    Absent is every expected employee-day without an attendance row.
    """

    return ReportTotals(
        total_employees=total_employees,
        total_present=sum(1 for r in rows if r.status == AttendanceStatus.PRESENT),
        total_late=sum(1 for r in rows if r.status == AttendanceStatus.LATE),
        total_leave=sum(1 for r in rows if r.status == AttendanceStatus.LEAVE),
        total_absent=max(0, total_employees * days - len(rows)),
        total_overtime_hours=round(sum(r.overtime_hours for r in rows), 2),
    )


def group_by_employee(rows: Sequence[AttendanceRow]) -> list[dict]:
    summary_map: dict[int, dict] = {}
    for r in rows:
        s = summary_map.get(r.employee_id)
        if not s:
            s = {
                "employee_id": r.employee_id,
                "full_name": r.full_name,
                "department": r.department_name,
                "position": r.position_name,
                "attendances": [],
                "total_days": 0,
                "late_count": 0,
                "total_overtime": 0.0,
                "total_working_hours": 0.0,
            }
            summary_map[r.employee_id] = s

        s["attendances"].append(
            {
                "date": r.work_date,
                "check_in": r.check_in,
                "check_out": r.check_out,
                "status": r.status,
                "is_late": r.is_late,
                "late_minutes": r.late_minutes,
                "working_hours": r.working_hours,
                "overtime_hours": r.overtime_hours,
            }
        )
        s["total_days"] += 1
        s["late_count"] += 1 if r.is_late else 0
        s["total_overtime"] += r.overtime_hours
        s["total_working_hours"] += r.working_hours

    return sorted(summary_map.values(), key=lambda x: x["full_name"] or "")


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        reports: ReportRepository,
    ):
        self._attendance = attendance
        self._employees = employees
        self._reports = reports

    def generate_attendance_report(
        self,
        company_id: int,
        report_type: Any,
        start_date: date,
        end_date: date,
        *,
        generated_at: datetime,
    ) -> AttendanceReport:
        report_type = parse_report_type(report_type)
        if end_date < start_date:
            raise ValidationError("End date must not be before start date")

        rows = self._attendance.list_rows(company_id=int(company_id), start_date=start_date, end_date=end_date)
        total_employees = self._employees.count_active(company_id=int(company_id), on=end_date)
        days = sum(1 for _ in iter_dates(start_date, end_date))
        totals = summarize(rows, total_employees=total_employees, days=days)

        report = AttendanceReport(
            report_id=0,
            company_id=int(company_id),
            report_type=report_type,
            report_date=start_date,
            start_date=start_date,
            end_date=end_date,
            totals=totals,
            report_data=to_jsonable(
                {
                    "summary": totals,
                    "employees": group_by_employee(rows),
                    "period": {"start_date": start_date, "end_date": end_date},
                    "generated_at": generated_at,
                }
            ),
            created_at=generated_at,
        )
        report_id = self._reports.create(report)
        logger.info(
            "%s attendance report %s generated for company %s (%s..%s, %d rows)",
            report_type.value,
            report_id,
            company_id,
            start_date,
            end_date,
            len(rows),
        )
        return replace(report, report_id=report_id)

    def get_attendance_reports(
        self,
        company_id: int,
        report_type: Optional[Any] = None,
        limit: int = DEFAULT_REPORT_LIMIT,
    ) -> Sequence[AttendanceReport]:
        return self._reports.list_for_company(
            company_id=int(company_id),
            report_type=parse_report_type(report_type) if report_type else None,
            limit=max(1, int(limit)),
        )

    def export_rows(self, company_id: int, *, start_date: date, end_date: date) -> list[dict]:
        """Flat rows for the CSV export."""

        rows = self._attendance.list_rows(company_id=int(company_id), start_date=start_date, end_date=end_date)
        return [
            {
                "employee_id": r.employee_id,
                "full_name": r.full_name,
                "department": r.department_name or "-",
                "shift": r.shift_name or "-",
                "work_date": r.work_date.strftime("%Y-%m-%d"),
                "check_in": r.check_in.strftime("%H:%M"),
                "check_out": r.check_out.strftime("%H:%M") if r.check_out else "-",
                "worked_hours": _hhmm(r.working_hours),
                "overtime_hours": _hhmm(r.overtime_hours),
                "status": r.status.value,
                "late_minutes": r.late_minutes,
                "location": r.location_name or "-",
                "notes": r.notes or "",
            }
            for r in rows
        ]
