from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.constants import DEFAULT_TOLERANCE_MINUTES


@dataclass(frozen=True)
class WorkShift:
    """A shift template owned by a position."""

    shift_id: int
    position_id: int
    name: str
    start_time: time
    end_time: time
    duration_hours: float
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES
    is_regular: bool = True
    position_name: Optional[str] = None

    @property
    def is_overnight(self) -> bool:
        return self.end_time <= self.start_time
