"""
Order-related exceptions.
"""

from .base import StorefrontException


class OrderException(StorefrontException):
    """Base exception for order-related errors."""
    pass


class OrderNotFoundException(OrderException):
    """Raised when order is not found in database."""

    kind = "NotFound"

    def __init__(self, order_id: int):
        super().__init__(
            f"Order {order_id} not found",
            details={'order_id': order_id}
        )
        self.order_id = order_id


class AlreadyDeliveredException(OrderException):
    """Raised when a status change is attempted on a delivered order."""

    kind = "AlreadyDelivered"

    def __init__(self, order_id: int):
        super().__init__(
            "You have already delivered this order",
            details={'order_id': order_id}
        )
        self.order_id = order_id


class InvalidOrderStatusException(OrderException):
    """Raised for unknown status values or transitions outside the state machine."""

    kind = "InvalidStatusTransition"

    def __init__(self, order_id: int, current_state: str, requested_state: str):
        super().__init__(
            f"Order {order_id} cannot move from '{current_state}' to '{requested_state}'",
            details={'order_id': order_id, 'current_state': current_state, 'requested_state': requested_state}
        )
        self.order_id = order_id
        self.current_state = current_state
        self.requested_state = requested_state


class OrderOwnershipException(OrderException):
    """Raised when user attempts to access an order they don't own."""

    kind = "Forbidden"

    def __init__(self, order_id: int, user_id: int):
        super().__init__(
            "Not authorized to view this order",
            details={'order_id': order_id, 'user_id': user_id}
        )
        self.order_id = order_id
        self.user_id = user_id
