class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when there is no authenticated user or credentials are wrong."""


class AuthorizationError(DomainError):
    """Raised when a teacher touches a classroom they do not own."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class StoreError(DomainError):
    """Raised when the entity store is unreachable or rejects a request."""


class EmptyExportError(DomainError):
    """Raised when an export is requested for an empty record set."""
