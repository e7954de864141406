from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..timekeeping import CheckInEvaluation
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, evaluation: CheckInEvaluation) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            is_late=True,
            late_minutes=evaluation.late_minutes,
        )
