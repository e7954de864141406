from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import hours_between, parse_iso_date, parse_year_month
from ..common.validators import optional_text, require_positive_id
from ..core.constants import DEFAULT_OVERTIME_MULTIPLIER
from ..core.enums import OvertimeStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, OvertimeStateError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import OvertimeCalculator
from .calculator.standard_calculator import StandardOvertimeCalculator
from .model import OvertimeFilter, OvertimeRecord, OvertimeSummary
from .repository import OvertimeRepository

logger = logging.getLogger(__name__)

_ACTIONS = {
    "approve": OvertimeStatus.APPROVED,
    "approved": OvertimeStatus.APPROVED,
    "reject": OvertimeStatus.REJECTED,
    "rejected": OvertimeStatus.REJECTED,
}


def parse_decision(action: Any) -> OvertimeStatus:
    if isinstance(action, OvertimeStatus) and action != OvertimeStatus.PENDING:
        return action
    status = _ACTIONS.get(str(action or "").strip().lower())
    if not status:
        raise ValidationError("Action must be Approved or Rejected")
    return status


def _optional_date(value: Any) -> Optional[date]:
    if not value:
        return None
    return value if isinstance(value, date) else parse_iso_date(str(value))


class OvertimeService:
    """Overtime approval workflow: Pending -> Approved | Rejected, decided by an admin."""

    def __init__(
        self,
        overtime: OvertimeRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[OvertimeCalculator] = None,
        default_multiplier: float = DEFAULT_OVERTIME_MULTIPLIER,
    ):
        self._overtime = overtime
        self._employees = employees
        self._calculator = calculator or StandardOvertimeCalculator()
        self._default_multiplier = float(default_multiplier)

    def get_record(self, overtime_id: int) -> OvertimeRecord:
        record = self._overtime.get_by_id(int(overtime_id))
        if not record:
            raise NotFoundError("Overtime record not found")
        return record

    def get_records(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Any = None,
        start_date: Any = None,
        end_date: Any = None,
    ) -> Sequence[OvertimeRecord]:
        try:
            status_enum = OvertimeStatus(status) if status else None
        except ValueError:
            raise ValidationError(f"Unknown overtime status {status!r}")

        return self._overtime.search(
            OvertimeFilter(
                employee_id=int(employee_id) if employee_id else None,
                status=status_enum,
                start_date=_optional_date(start_date),
                end_date=_optional_date(end_date),
            )
        )

    def request_overtime(
        self,
        *,
        employee_id: Any,
        start_time: datetime,
        end_time: datetime,
        reason: Optional[str] = None,
        attendance_id: Optional[int] = None,
    ) -> OvertimeRecord:
        """Submit overtime that was not derived from a check-out."""

        employee_id = require_positive_id(employee_id, "Employee")
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")
        if end_time <= start_time:
            raise ValidationError("Overtime end must be after its start")

        overtime_id = self._overtime.create_pending(
            employee_id=employee_id,
            attendance_id=attendance_id,
            overtime_date=start_time.date(),
            start_time=start_time,
            end_time=end_time,
            duration_hours=hours_between(start_time, end_time),
            multiplier=self._default_multiplier,
            reason=optional_text(reason),
        )
        logger.info("Overtime %s requested by employee %s", overtime_id, employee_id)
        return self.get_record(overtime_id)

    def approve(
        self,
        overtime_id: int,
        approver_id: int,
        action: Any,
        notes: Optional[str] = None,
        *,
        current_role: Role,
        now: datetime,
    ) -> OvertimeRecord:
        """Decide a Pending record.

        Rejection needs notes. Deciding a record that is no longer Pending
        raises OvertimeStateError; the update itself is conditional on the
        Pending status so two concurrent approvers cannot both win.
        """

        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can decide overtime")

        status = parse_decision(action)
        notes = optional_text(notes)
        if status == OvertimeStatus.REJECTED and not notes:
            raise ValidationError("Notes are required when rejecting overtime")

        record = self.get_record(overtime_id)
        if not record.is_pending:
            raise OvertimeStateError(f"Overtime has already been {record.status.value.lower()}")

        compensation = None
        if status == OvertimeStatus.APPROVED:
            compensation = self._compensation_for(record, on=record.overtime_date)

        decided = self._overtime.decide(
            overtime_id=record.overtime_id,
            status=status,
            approver_id=int(approver_id),
            approved_at=now,
            notes=notes,
            total_compensation=compensation,
        )
        if not decided:
            raise OvertimeStateError("Overtime has already been decided")

        logger.info("Overtime %s %s by %s", record.overtime_id, status.value, approver_id)
        return self.get_record(record.overtime_id)

    def _compensation_for(self, record: OvertimeRecord, *, on: date) -> Optional[float]:
        contract = self._employees.get_active_contract(record.employee_id, on=on)
        if not contract:
            return None
        return self._calculator.compensation(
            duration_hours=record.duration_hours,
            multiplier=record.multiplier,
            salary_base=contract.salary_base,
        )

    def get_summary(self, employee_id: int, year_month: str) -> OvertimeSummary:
        first, last = parse_year_month(year_month)
        records = list(
            self._overtime.search(OvertimeFilter(employee_id=int(employee_id), start_date=first, end_date=last))
        )

        approved = [r for r in records if r.status == OvertimeStatus.APPROVED]
        return OvertimeSummary(
            employee_id=int(employee_id),
            year_month=first.strftime("%Y-%m"),
            total_records=len(records),
            total_hours=sum(r.duration_hours for r in records),
            approved_hours=sum(r.duration_hours for r in approved),
            total_compensation=sum(r.total_compensation or 0.0 for r in approved),
            pending_count=sum(1 for r in records if r.status == OvertimeStatus.PENDING),
            approved_count=len(approved),
            rejected_count=sum(1 for r in records if r.status == OvertimeStatus.REJECTED),
            records=tuple(records),
        )
