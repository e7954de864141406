from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import OvertimeStatus
from .model import OvertimeFilter, OvertimeRecord


class OvertimeRepository(Protocol):
    def get_by_id(self, overtime_id: int) -> Optional[OvertimeRecord]:
        raise NotImplementedError

    def search(self, filters: OvertimeFilter) -> Sequence[OvertimeRecord]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        """Move a Pending record to a terminal status.

        Returns False when the record is no longer Pending.
        """

        raise NotImplementedError
