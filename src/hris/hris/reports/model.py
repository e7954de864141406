from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import ReportType


@dataclass(frozen=True)
class ReportTotals:
    total_employees: int = 0
    total_present: int = 0
    total_late: int = 0
    total_absent: int = 0
    total_leave: int = 0
    total_overtime_hours: float = 0.0


@dataclass(frozen=True)
class AttendanceReport:
    report_id: int
    company_id: int
    report_type: ReportType
    report_date: date
    start_date: date
    end_date: date
    totals: ReportTotals
    report_data: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
