"""
Product and stock related exceptions.
"""

from .base import StorefrontException


class ProductException(StorefrontException):
    """Base exception for product-related errors."""
    pass


class ProductNotFoundException(ProductException):
    """Raised when product is not found in database."""

    kind = "NotFound"

    def __init__(self, product_id: int):
        super().__init__(
            f"Product {product_id} not found",
            details={'product_id': product_id}
        )
        self.product_id = product_id


class InsufficientStockException(ProductException):
    """Raised when a cart mutation asks for more units than are in stock."""

    kind = "InsufficientStock"

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Only {available} items available in stock",
            details={'product_id': product_id, 'requested': requested, 'available': available}
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class OutOfStockException(ProductException):
    """Raised at order placement when a product can no longer cover the ordered quantity."""

    kind = "OutOfStock"

    def __init__(self, product_id: int | None, product_name: str | None, requested: int, available: int):
        super().__init__(
            f"Product {product_name or 'Unknown'} is out of stock",
            details={'product_id': product_id, 'requested': requested, 'available': available}
        )
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available


class InvalidProductDataException(ProductException):
    """Raised when admin catalog input is incomplete or invalid."""

    kind = "InvalidProduct"

    def __init__(self, reason: str):
        super().__init__(reason, details={'reason': reason})
        self.reason = reason
