from enum import Enum


class RateLimitOperation(str, Enum):
    """
    Rate limit operation types.

    Each operation has its own independent rate limit counter.
    """

    ORDER_PLACE = "order_place"
    """
    Rate limit for order placement.
    Config: MAX_ORDERS_PER_USER_PER_HOUR
    """

    PAYMENT_INTENT = "payment_intent"
    """
    Rate limit for payment intent creation.
    Prevents spamming the card gateway with intents.
    Config: MAX_PAYMENT_INTENTS_PER_HOUR
    """
