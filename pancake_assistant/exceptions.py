"""Domain exception hierarchy.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed. The API layer maps each family
to an HTTP status in main.py.
"""


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(DomainError):
    """Raised when a recipe, recommendation or history record does not exist."""


class ConstraintViolation(DomainError):
    """Raised when an operation would break a store invariant.

    Examples: editing or deleting the default recipe, reusing a recipe name.
    """


class StoreUnavailable(DomainError):
    """Raised when the underlying database fails or a transaction aborts."""


class InvalidInput(DomainError):
    """Raised for out-of-domain values such as a temperature outside 1-9."""


class SessionStateError(DomainError):
    """Raised when a cooking session action is not valid in the current phase."""
