import logging
import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from functools import wraps
from typing import AsyncGenerator

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_commit, session_rollback

logger = logging.getLogger(__name__)


class TransactionManager:
    """
    Utility class for running a multi-step unit of work as one database
    transaction, with rollback on any failure and retry on transient errors.
    """

    MAX_RETRIES = 3
    RETRY_DELAY_BASE = 0.1  # Base delay in seconds

    @staticmethod
    @asynccontextmanager
    async def atomic(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
        """
        Commit everything done inside the block, or roll all of it back.

        Usage:
            async with TransactionManager.atomic(session):
                await OrderRepository.create(order_dto, session)
                ...
        """
        transaction_start = datetime.now()
        try:
            yield session
            await session_commit(session)
            duration = (datetime.now() - transaction_start).total_seconds()
            logger.debug(f"Transaction committed successfully in {duration:.2f}s")
        except Exception as e:
            try:
                await session_rollback(session)
                logger.info(f"Transaction rolled back due to error: {type(e).__name__}: {str(e)}")
            except Exception as rollback_error:
                logger.critical(f"Failed to rollback transaction: {str(rollback_error)}")
            raise

    @staticmethod
    def with_retry(max_retries: int | None = None, delay_base: float | None = None):
        """
        Decorator for automatic retry of database operations with exponential backoff.

        Only OperationalError (locked database, dropped connection) is retried;
        domain exceptions propagate on the first attempt.
        """
        max_retries = max_retries if max_retries is not None else TransactionManager.MAX_RETRIES
        delay_base = delay_base if delay_base is not None else TransactionManager.RETRY_DELAY_BASE

        def decorator(func):
            @wraps(func)
            async def wrapper(*args, **kwargs):
                last_exception = None

                for attempt in range(max_retries + 1):
                    try:
                        return await func(*args, **kwargs)
                    except OperationalError as e:
                        last_exception = e

                        if attempt == max_retries:
                            logger.error(f"Function {func.__name__} failed after {max_retries} retries: {str(e)}")
                            break

                        delay = delay_base * (2 ** attempt)
                        logger.warning(f"Attempt {attempt + 1} failed for {func.__name__}, retrying in {delay:.2f}s: {str(e)}")
                        await asyncio.sleep(delay)

                raise last_exception

            return wrapper
        return decorator
