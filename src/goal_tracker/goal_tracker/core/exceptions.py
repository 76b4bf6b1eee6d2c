class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the addressed objective does not exist."""


class ConflictError(DomainError):
    """Raised when an update was based on a stale version of the objective."""


class LockedForEditingError(DomainError):
    """Raised when progress is logged against an objective past its due date."""


class PersistenceError(DomainError):
    """Raised when the storage layer fails. Carries no domain meaning."""
