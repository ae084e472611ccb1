"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class DuplicateError(ValidationError):
    """Entity with the same unique key already exists."""


class AuthenticationError(DomainError):
    """Credentials did not match a known user."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class PathSecurityError(DomainError):
    """A resolved file path escapes its expected root directory."""


class RelocationError(DomainError):
    """Writing an upload to staging or moving it into permanent storage failed."""


class PersistenceError(DomainError):
    """The document store is unreachable or rejected the operation."""
