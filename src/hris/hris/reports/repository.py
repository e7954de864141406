from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ReportType
from .model import AttendanceReport


class ReportRepository(Protocol):
    def create(self, report: AttendanceReport) -> int:
        """Persist a generated report (its ``report_id`` is ignored). Returns the new id."""

        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[AttendanceReport]:
        raise NotImplementedError

    def list_for_company(
        self,
        *,
        company_id: int,
        report_type: Optional[ReportType] = None,
        limit: int = 10,
    ) -> Sequence[AttendanceReport]:
        raise NotImplementedError
