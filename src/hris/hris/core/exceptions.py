class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced row does not exist (or is soft-deleted)."""


class ConflictError(DomainError):
    """Raised when an action collides with existing data (duplicates, children)."""


class OutOfRangeError(ValidationError):
    """The reported position is not inside any registered location."""


class AlreadyCheckedInError(ConflictError):
    """The employee already has an attendance row for the work date."""


class AlreadyCheckedOutError(ConflictError):
    """The attendance row already carries a check-out time."""


class NotCheckedInYetError(ValidationError):
    """Check-out requested without a check-in for the work date."""


class InvalidTimestampError(ValidationError):
    """Check-out time lies before the check-in time."""


class OvertimeStateError(ConflictError):
    """Overtime record is no longer Pending."""
