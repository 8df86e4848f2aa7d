"""
Cart-related exceptions.
"""

from .base import StorefrontException


class CartException(StorefrontException):
    """Base exception for cart-related errors."""
    pass


class CartNotFoundException(CartException):
    """Raised when the user has no cart."""

    kind = "NotFound"

    def __init__(self, user_id: int):
        super().__init__(
            "Cart not found",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class CartItemNotFoundException(CartException):
    """Raised when a product is not part of the user's cart."""

    kind = "NotFound"

    def __init__(self, user_id: int, product_id: int):
        super().__init__(
            "Item not found in cart",
            details={'user_id': user_id, 'product_id': product_id}
        )
        self.user_id = user_id
        self.product_id = product_id


class EmptyCartException(CartException):
    """Raised when trying to checkout with an absent or empty cart."""

    kind = "EmptyCart"

    def __init__(self, user_id: int):
        super().__init__(
            "Cart is empty",
            details={'user_id': user_id}
        )
        self.user_id = user_id
