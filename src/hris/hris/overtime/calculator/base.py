from __future__ import annotations

from abc import ABC, abstractmethod


class OvertimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for overtime pay)."""

    @abstractmethod
    def compensation(self, *, duration_hours: float, multiplier: float, salary_base: float) -> float:
        raise NotImplementedError
