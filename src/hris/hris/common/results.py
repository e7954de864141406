from __future__ import annotations

import dataclasses
import functools
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred"


@dataclass(frozen=True)
class ActionResult:
    """Uniform result returned by every server action."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    status_code: int = 200

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "ActionResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, *, status_code: int = 400) -> "ActionResult":
        return cls(success=False, error=error, status_code=status_code)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = to_jsonable(self.data)
        if self.error is not None:
            out["error"] = self.error
        if self.message is not None:
            out["message"] = self.message
        return out


def status_code_for(exc: DomainError) -> int:
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, AuthorizationError):
        return 403
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    return 400


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses/enums/dates into JSON-friendly primitives."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def server_action(failure_message: str = GENERIC_ERROR, *, success_message: Optional[str] = None):
    """Run a use case and fold its outcome into an ActionResult.

    Domain errors keep their message; anything else is logged and reported
    with ``failure_message``.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., ActionResult]:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> ActionResult:
            try:
                out = fn(*args, **kwargs)
            except DomainError as e:
                logger.info("%s rejected: %s", fn.__name__, e)
                return ActionResult.fail(str(e), status_code=status_code_for(e))
            except Exception:
                logger.exception("%s failed", fn.__name__)
                return ActionResult.fail(failure_message, status_code=500)

            if isinstance(out, ActionResult):
                return out
            return ActionResult.ok(out, message=success_message)

        return wrapper

    return decorator
