"""
User-related exceptions.
"""

from .base import StorefrontException


class UserException(StorefrontException):
    """Base exception for user-related errors."""
    pass


class UserNotFoundException(UserException):
    """Raised when user is not found in database."""

    kind = "NotFound"

    def __init__(self, user_id: int):
        super().__init__(
            f"User does not exist with Id: {user_id}",
            details={'user_id': user_id}
        )
        self.user_id = user_id
