from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import OvertimeStatus


@dataclass(frozen=True)
class OvertimeRecord:
    overtime_id: int
    employee_id: int
    overtime_date: date
    start_time: datetime
    end_time: datetime
    duration_hours: float
    multiplier: float
    status: OvertimeStatus
    attendance_id: Optional[int] = None
    total_compensation: Optional[float] = None
    reason: Optional[str] = None
    approver_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    notes: Optional[str] = None
    employee_name: Optional[str] = None
    approver_name: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == OvertimeStatus.PENDING


@dataclass(frozen=True)
class OvertimeFilter:
    employee_id: Optional[int] = None
    status: Optional[OvertimeStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class OvertimeSummary:
    employee_id: int
    year_month: str
    total_records: int
    total_hours: float
    approved_hours: float
    total_compensation: float
    pending_count: int
    approved_count: int
    rejected_count: int
    records: tuple[OvertimeRecord, ...] = ()
