"""
Base exception classes for the storefront core.
"""


class StorefrontException(Exception):
    """
    Base exception for all storefront domain errors.

    All domain-rule and validation failures inherit from this class so the
    web layer can turn them into a structured error response with a single
    handler.

    Attributes:
        kind: Stable machine-readable error kind (e.g. "PriceMismatch")
        message: Human-readable error message
        details: Optional dict with additional context (entity IDs, amounts, etc.)
    """

    kind: str = "StorefrontError"

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class ForbiddenException(StorefrontException):
    """Raised when the requester may not perform the operation."""

    kind = "Forbidden"

    def __init__(self, reason: str, user_id: int | None = None):
        super().__init__(reason, details={'user_id': user_id} if user_id is not None else None)
        self.reason = reason
        self.user_id = user_id


class RateLimitExceededException(StorefrontException):
    """Raised when a user exceeds the allowed rate for an operation."""

    kind = "RateLimited"

    def __init__(self, operation: str, user_id: int, retry_after: int):
        super().__init__(
            f"Too many requests. Try again in {max(1, retry_after // 60)} minute(s)",
            details={'operation': operation, 'user_id': user_id, 'retry_after': retry_after}
        )
        self.operation = operation
        self.user_id = user_id
        self.retry_after = retry_after
