"""
Review-related exceptions.
"""

from .base import StorefrontException


class ReviewException(StorefrontException):
    """Base exception for review-related errors."""
    pass


class ReviewNotFoundException(ReviewException):
    """Raised when review is not found."""

    kind = "NotFound"

    def __init__(self, review_id: int):
        super().__init__(
            "Review not found",
            details={'review_id': review_id}
        )
        self.review_id = review_id


class PurchaseRequiredException(ReviewException):
    """Raised when a user reviews a product they never received."""

    kind = "PurchaseRequired"

    def __init__(self, user_id: int, product_id: int):
        super().__init__(
            "You must purchase this product before leaving a review",
            details={'user_id': user_id, 'product_id': product_id}
        )
        self.user_id = user_id
        self.product_id = product_id


class InvalidReviewException(ReviewException):
    """Raised when rating is out of range or comment is empty."""

    kind = "InvalidReview"

    def __init__(self, reason: str):
        super().__init__(reason, details={'reason': reason})
        self.reason = reason
