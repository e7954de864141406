from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..timekeeping import CheckInEvaluation
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in."""

    def decide_checkin(self, evaluation: CheckInEvaluation) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
