from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Protocol, Sequence

from .model import WorkShift


class ShiftRepository(Protocol):
    def list_all(self, *, position_id: Optional[int] = None) -> Sequence[WorkShift]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[WorkShift]:
        raise NotImplementedError

    def first_for_position(self, position_id: int) -> Optional[WorkShift]:
        """Default shift of a position (lowest id)."""

        raise NotImplementedError

    def find_by_name(self, *, position_id: int, name: str) -> Optional[WorkShift]:
        raise NotImplementedError

    def create(
        self,
        *,
        position_id: int,
        name: str,
        start_time: time,
        end_time: time,
        duration_hours: float,
        tolerance_minutes: int,
        is_regular: bool,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        shift_id: int,
        position_id: int,
        name: str,
        start_time: time,
        end_time: time,
        duration_hours: float,
        tolerance_minutes: int,
        is_regular: bool,
        updated_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def soft_delete(self, shift_id: int, *, deleted_at: datetime) -> bool:
        raise NotImplementedError

    def soft_delete_for_positions(self, position_ids: Sequence[int], *, deleted_at: datetime) -> int:
        raise NotImplementedError

    def count_attendances(self, shift_id: int) -> int:
        raise NotImplementedError
