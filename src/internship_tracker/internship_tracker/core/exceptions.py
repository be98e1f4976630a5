class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when the credential is missing, invalid or expired."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for a resource it can see."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when an entity does not exist or is hidden from the caller."""

    status_code = 404


class ConflictError(DomainError):
    """Raised on uniqueness or state machine violations."""

    status_code = 409


class UnavailableError(DomainError):
    """Raised when the data store fails."""

    status_code = 503
