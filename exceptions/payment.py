"""
Payment and pricing validation exceptions raised during order placement.
"""

from .base import StorefrontException


class PaymentException(StorefrontException):
    """Base exception for payment-related errors."""
    pass


class InvalidPaymentMethodException(PaymentException):
    """Raised when payment method is missing or not supported."""

    kind = "InvalidPaymentMethod"

    def __init__(self, method: str | None):
        super().__init__(
            "Invalid payment method",
            details={'method': method}
        )
        self.method = method


class MissingPaymentReferenceException(PaymentException):
    """Raised when a gateway payment arrives without the gateway's payment id."""

    kind = "MissingPaymentReference"

    def __init__(self, method: str):
        super().__init__(
            f"Payment ID is required for {method} payments",
            details={'method': method}
        )
        self.method = method


class InvalidPricingException(PaymentException):
    """Raised when a submitted price field is negative (or a payable amount is not positive)."""

    kind = "InvalidPricing"

    def __init__(self, reason: str = "Invalid pricing information", details: dict | None = None):
        super().__init__(reason, details=details)
        self.reason = reason


class PriceMismatchException(PaymentException):
    """Raised when submitted totals don't add up within tolerance."""

    kind = "PriceMismatch"

    def __init__(self, expected: float, received: float, field: str = "total_price"):
        super().__init__(
            "Invalid total price calculation",
            details={'field': field, 'expected': expected, 'received': received}
        )
        self.field = field
        self.expected = expected
        self.received = received


class PaymentGatewayException(PaymentException):
    """Raised when the card gateway is unreachable or rejects the intent."""

    kind = "PaymentGatewayError"

    def __init__(self, reason: str):
        super().__init__(reason, details={'reason': reason})
        self.reason = reason
