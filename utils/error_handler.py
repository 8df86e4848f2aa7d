"""
Error Handler Utility for the HTTP layer

Provides centralized error handling with:
- Automatic exception to HTTP status mapping
- A single structured error envelope
- Logging for debugging

Usage in the application factory:
    from utils.error_handler import handle_service_error, handle_unexpected_error

    status_code, body = handle_service_error(exception)
    return JSONResponse(status_code=status_code, content=body)
"""

import logging

from exceptions import (
    StorefrontException,
    ForbiddenException,
    RateLimitExceededException,
    ProductNotFoundException,
    CartNotFoundException,
    CartItemNotFoundException,
    OrderNotFoundException,
    OrderOwnershipException,
    ReviewNotFoundException,
    UserNotFoundException,
    PaymentGatewayException,
)

DEFAULT_ERROR_STATUS = 400
UNEXPECTED_ERROR_STATUS = 500
UNEXPECTED_ERROR_MESSAGE = "Something went wrong"

# Exceptions not listed here are validation / domain-rule failures -> 400
error_mapping: dict[type[StorefrontException], int] = {
    # Missing entities
    ProductNotFoundException: 404,
    CartNotFoundException: 404,
    CartItemNotFoundException: 404,
    OrderNotFoundException: 404,
    ReviewNotFoundException: 404,
    UserNotFoundException: 404,

    # Permission failures
    ForbiddenException: 403,
    OrderOwnershipException: 403,

    # Throttling
    RateLimitExceededException: 429,

    # Upstream failures
    PaymentGatewayException: 502,
}


def build_error_response(kind: str, message: str) -> dict:
    return {"success": False, "error": {"kind": kind, "message": message}}


def get_status_code(exception: StorefrontException) -> int:
    for exception_type in type(exception).__mro__:
        if exception_type in error_mapping:
            return error_mapping[exception_type]
    return DEFAULT_ERROR_STATUS


def handle_service_error(exception: StorefrontException) -> tuple[int, dict]:
    """
    Convert a domain exception into (status_code, response body).

    Example:
        try:
            order = await OrderManagementService.get_order(123, user, session)
        except StorefrontException as e:
            status_code, body = handle_service_error(e)
    """
    status_code = get_status_code(exception)
    logging.warning(f"Service error handled: {type(exception).__name__} ({status_code}) - {str(exception)}")
    return status_code, build_error_response(exception.kind, exception.message)


def handle_unexpected_error(exception: Exception) -> tuple[int, dict]:
    """
    Handle unexpected exceptions (non-StorefrontException).

    Note:
        Logs the full exception; the response never carries internals
    """
    logging.error(f"Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=exception)
    return UNEXPECTED_ERROR_STATUS, build_error_response("InternalError", UNEXPECTED_ERROR_MESSAGE)
