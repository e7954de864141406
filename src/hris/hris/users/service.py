from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError
from .repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    username: str
    role: Role
    employee_id: Optional[int]
    company_id: Optional[int]
    full_name: str


def _password_matches(password_hash: str, password: Optional[str]) -> bool:
    try:
        return check_password_hash(password_hash, password or "")
    except ValueError:
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        if not _password_matches(user.password_hash, password):
            raise AuthenticationError("Invalid username or password")

        logger.info("User %s signed in", user.username)
        return SessionUser(
            user_id=user.user_id,
            username=user.username,
            role=user.role,
            employee_id=user.employee_id,
            company_id=user.company_id,
            full_name=user.full_name or user.username,
        )


class UserService:
    """Use case: manage login accounts."""

    def __init__(self, users: UserRepository):
        self._users = users

    def change_password(self, user_id: int, *, current_password: str, new_password: str) -> None:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if not _password_matches(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")

        require_non_empty(new_password, "New password")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        self._users.set_password_hash(user.user_id, generate_password_hash(new_password))
        logger.info("Password changed for user %s", user.username)

    def set_active(self, user_id: int, *, is_active: bool) -> None:
        if not self._users.set_active(int(user_id), is_active=is_active):
            raise NotFoundError("User not found")
