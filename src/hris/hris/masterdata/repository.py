from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class MasterRepository(Protocol, Generic[T]):
    """Shared interface of the organisational master-data tables.

    ``parent_id`` is the owning row (company for departments, department for
    positions); tables without a parent ignore it.
    """

    def list_all(self, *, parent_id: Optional[int] = None) -> Sequence[T]:
        raise NotImplementedError

    def get_by_id(self, row_id: int) -> Optional[T]:
        raise NotImplementedError

    def find_by_name(self, name: str, *, parent_id: Optional[int] = None) -> Optional[T]:
        raise NotImplementedError

    def create(self, fields: dict[str, Any]) -> int:
        raise NotImplementedError

    def update(self, row_id: int, fields: dict[str, Any], *, updated_at: datetime) -> bool:
        raise NotImplementedError

    def soft_delete(self, row_id: int, *, deleted_at: datetime) -> bool:
        raise NotImplementedError

    def ids_for_parents(self, parent_ids: Sequence[int]) -> list[int]:
        raise NotImplementedError

    def soft_delete_for_parents(self, parent_ids: Sequence[int], *, deleted_at: datetime) -> int:
        raise NotImplementedError
