"""
Rate Limiting

Protects the order and payment paths from abuse using Redis-based counters.

Features:
- Per-user rate limiting for order placement
- Per-user rate limiting for payment-intent creation
- Configurable limits via environment variables
- Automatic expiry using Redis TTL
- Fails open when Redis is unavailable

Configuration:
- MAX_ORDERS_PER_USER_PER_HOUR: Maximum orders per user per hour
- MAX_PAYMENT_INTENTS_PER_HOUR: Maximum payment intents per user per hour
"""

import logging

from redis.asyncio import Redis

import config
from enums.rate_limit_operation import RateLimitOperation
from exceptions import RateLimitExceededException

HOUR_SECONDS = 3600


class RateLimiter:
    """
    Redis-based rate limiter for specific operations.

    Usage:
        limiter = RateLimiter(redis)
        await limiter.enforce(RateLimitOperation.ORDER_PLACE, user_id)
    """

    def __init__(self, redis: Redis):
        self.redis = redis

    @staticmethod
    def limits_for(operation: RateLimitOperation) -> tuple[int, int]:
        """(max_count, window_seconds) configured for an operation."""
        if operation == RateLimitOperation.ORDER_PLACE:
            return config.MAX_ORDERS_PER_USER_PER_HOUR, HOUR_SECONDS
        return config.MAX_PAYMENT_INTENTS_PER_HOUR, HOUR_SECONDS

    async def is_rate_limited(
        self,
        operation: str,
        user_id: int,
        max_count: int,
        window_seconds: int
    ) -> tuple[bool, int, int]:
        """
        Check if user has exceeded rate limit for an operation.

        Args:
            operation: Operation name (e.g., "order_place", "payment_intent")
            user_id: User ID
            max_count: Maximum allowed operations in time window
            window_seconds: Time window in seconds

        Returns:
            Tuple of (is_limited, current_count, remaining_count)
            - is_limited: True if user has exceeded the limit
            - current_count: Current number of operations in window
            - remaining_count: Number of operations remaining (0 if limited)
        """
        key = f"rate_limit:{operation}:{user_id}"

        try:
            current_count = await self.redis.incr(key)

            # Set expiry on first increment
            if current_count == 1:
                await self.redis.expire(key, window_seconds)

            is_limited = current_count > max_count
            remaining = max(0, max_count - current_count)

            if is_limited:
                ttl = await self.redis.ttl(key)
                logging.warning(
                    f"Rate limit exceeded: user={user_id}, operation={operation}, "
                    f"count={current_count}/{max_count}, resets_in={ttl}s"
                )

            return is_limited, current_count, remaining

        except Exception as e:
            # If Redis fails, don't block the operation (fail open)
            logging.error(f"Rate limiter error: {e}")
            return False, 0, max_count

    async def enforce(self, operation: RateLimitOperation, user_id: int) -> int:
        """
        Count one operation and raise if the user is over the configured limit.

        Returns:
            Remaining operations in the current window

        Raises:
            RateLimitExceededException: If the limit is exceeded
        """
        max_count, window_seconds = self.limits_for(operation)
        is_limited, _, remaining = await self.is_rate_limited(operation.value, user_id, max_count, window_seconds)
        if is_limited:
            retry_after = await self.get_remaining_time(operation.value, user_id)
            raise RateLimitExceededException(operation.value, user_id, retry_after)
        return remaining

    async def reset_limit(self, operation: str, user_id: int):
        """
        Reset rate limit counter for a user.

        Usage:
            # Admin manually resets a user's rate limit
            await limiter.reset_limit("order_place", 12345)
        """
        key = f"rate_limit:{operation}:{user_id}"
        await self.redis.delete(key)
        logging.info(f"Rate limit reset: user={user_id}, operation={operation}")

    async def get_remaining_time(self, operation: str, user_id: int) -> int:
        """
        Get remaining time until rate limit resets.

        Returns:
            Remaining seconds until reset (0 if not rate limited)
        """
        key = f"rate_limit:{operation}:{user_id}"
        try:
            ttl = await self.redis.ttl(key)
        except Exception as e:
            logging.error(f"Rate limiter error: {e}")
            return 0
        return ttl if ttl > 0 else 0
