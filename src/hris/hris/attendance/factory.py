from __future__ import annotations

from dataclasses import dataclass

from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .timekeeping import CheckInEvaluation


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, evaluation: CheckInEvaluation) -> AttendanceStrategy:
        if evaluation.is_late:
            return LateStrategy()
        return NormalStrategy()
