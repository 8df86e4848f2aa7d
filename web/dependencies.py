import logging
import uuid
from datetime import datetime
from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from clients.llm import CompletionClient
from clients.payment_gateway import PaymentGateway
from db import get_db_session
from middleware.rate_limit import RateLimiter
from models.user import UserDTO
from repositories.user import UserRepository

logger = logging.getLogger(__name__)


def generate_correlation_id() -> str:
    """Generate unique correlation ID for request tracing."""
    return f"{datetime.now().strftime('%Y%m%d-%H%M%S')}-{uuid.uuid4().hex[:8]}"


async def get_session() -> AsyncIterator[AsyncSession]:
    async with get_db_session() as session:
        yield session


async def get_current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    session: AsyncSession = Depends(get_session),
) -> UserDTO:
    """
    Identity set by the upstream authentication layer.

    Missing, malformed or unknown ids are all 401.
    """
    if x_user_id is None or not x_user_id.strip().isdigit():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Please login to access this resource")
    user = await UserRepository.get_by_id(int(x_user_id.strip()), session)
    if user is None:
        logger.warning(f"Request with unknown user id {x_user_id}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Please login to access this resource")
    return user


async def require_admin(user: UserDTO = Depends(get_current_user)) -> UserDTO:
    if not user.is_admin:
        logger.warning(f"User {user.id} denied access to admin route")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_completion_client(request: Request) -> CompletionClient | None:
    return request.app.state.completion_client


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway
