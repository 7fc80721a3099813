class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the session is missing."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class InvalidTransitionError(ValidationError):
    """Raised when a leave request is moved out of a terminal state."""

    status_code = 409


class ConflictError(DomainError):
    """Raised when a change is refused because other records depend on the target."""

    status_code = 409
