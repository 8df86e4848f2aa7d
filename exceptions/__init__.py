"""
Custom exceptions for the storefront core.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application. Every exception carries a stable ``kind`` that the web
layer exposes as the machine-readable error code.

Exception Hierarchy:
--------------------
StorefrontException (base)
├── ForbiddenException                       kind=Forbidden
├── RateLimitExceededException               kind=RateLimited
├── ProductException
│   ├── ProductNotFoundException             kind=NotFound
│   ├── InsufficientStockException           kind=InsufficientStock
│   ├── OutOfStockException                  kind=OutOfStock
│   └── InvalidProductDataException          kind=InvalidProduct
├── CartException
│   ├── CartNotFoundException                kind=NotFound
│   ├── CartItemNotFoundException            kind=NotFound
│   └── EmptyCartException                   kind=EmptyCart
├── OrderException
│   ├── OrderNotFoundException               kind=NotFound
│   ├── AlreadyDeliveredException            kind=AlreadyDelivered
│   ├── InvalidOrderStatusException          kind=InvalidStatusTransition
│   └── OrderOwnershipException              kind=Forbidden
├── PaymentException
│   ├── InvalidPaymentMethodException        kind=InvalidPaymentMethod
│   ├── MissingPaymentReferenceException     kind=MissingPaymentReference
│   ├── InvalidPricingException              kind=InvalidPricing
│   ├── PriceMismatchException               kind=PriceMismatch
│   └── PaymentGatewayException              kind=PaymentGatewayError
├── ReviewException
│   ├── ReviewNotFoundException              kind=NotFound
│   ├── PurchaseRequiredException            kind=PurchaseRequired
│   └── InvalidReviewException               kind=InvalidReview
└── UserException
    └── UserNotFoundException                kind=NotFound

Usage:
------
Services raise specific exceptions:
    raise OrderNotFoundException(order_id=123)

The FastAPI exception handler converts them into structured responses:
    {"success": false, "error": {"kind": "NotFound", "message": "Order 123 not found"}}
"""

from .base import StorefrontException, ForbiddenException, RateLimitExceededException
from .cart import CartException, CartNotFoundException, CartItemNotFoundException, EmptyCartException
from .product import (
    ProductException,
    ProductNotFoundException,
    InsufficientStockException,
    OutOfStockException,
    InvalidProductDataException,
)
from .order import (
    OrderException,
    OrderNotFoundException,
    AlreadyDeliveredException,
    InvalidOrderStatusException,
    OrderOwnershipException,
)
from .payment import (
    PaymentException,
    InvalidPaymentMethodException,
    MissingPaymentReferenceException,
    InvalidPricingException,
    PriceMismatchException,
    PaymentGatewayException,
)
from .review import ReviewException, ReviewNotFoundException, PurchaseRequiredException, InvalidReviewException
from .user import UserException, UserNotFoundException

__all__ = [
    # Base
    'StorefrontException',
    'ForbiddenException',
    'RateLimitExceededException',

    # Product
    'ProductException',
    'ProductNotFoundException',
    'InsufficientStockException',
    'OutOfStockException',
    'InvalidProductDataException',

    # Cart
    'CartException',
    'CartNotFoundException',
    'CartItemNotFoundException',
    'EmptyCartException',

    # Order
    'OrderException',
    'OrderNotFoundException',
    'AlreadyDeliveredException',
    'InvalidOrderStatusException',
    'OrderOwnershipException',

    # Payment
    'PaymentException',
    'InvalidPaymentMethodException',
    'MissingPaymentReferenceException',
    'InvalidPricingException',
    'PriceMismatchException',
    'PaymentGatewayException',

    # Review
    'ReviewException',
    'ReviewNotFoundException',
    'PurchaseRequiredException',
    'InvalidReviewException',

    # User
    'UserException',
    'UserNotFoundException',
]
