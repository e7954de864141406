from __future__ import annotations

from ...core.constants import DEFAULT_OVERTIME_HOURLY_DIVISOR
from .base import OvertimeCalculator


class StandardOvertimeCalculator(OvertimeCalculator):
    """Standard rule: hours x multiplier x (monthly salary / divisor), rounded to cents."""

    def __init__(self, hourly_divisor: float = DEFAULT_OVERTIME_HOURLY_DIVISOR):
        if hourly_divisor <= 0:
            raise ValueError("hourly_divisor must be positive")
        self._divisor = float(hourly_divisor)

    def hourly_rate(self, salary_base: float) -> float:
        return float(salary_base) / self._divisor

    def compensation(self, *, duration_hours: float, multiplier: float, salary_base: float) -> float:
        amount = float(duration_hours) * float(multiplier) * self.hourly_rate(salary_base)
        return round(max(amount, 0.0), 2)
