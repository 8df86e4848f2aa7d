import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from clients.payment_gateway import PaymentGateway
from enums.rate_limit_operation import RateLimitOperation
from middleware.rate_limit import RateLimiter
from models.user import UserDTO
from services.order import OrderService
from services.order_management import OrderManagementService
from services.payment import PaymentService
from web.dependencies import (
    generate_correlation_id,
    get_current_user,
    get_payment_gateway,
    get_rate_limiter,
    get_session,
)
from web.schemas import PlaceOrderRequest

logger = logging.getLogger(__name__)

order_router = APIRouter(prefix="/api/orders", tags=["orders"])


@order_router.post("/create-payment-intent")
async def create_payment_intent(user: UserDTO = Depends(get_current_user),
                                session: AsyncSession = Depends(get_session),
                                limiter: RateLimiter = Depends(get_rate_limiter),
                                gateway: PaymentGateway = Depends(get_payment_gateway)):
    await limiter.enforce(RateLimitOperation.PAYMENT_INTENT, user.id)
    client_secret = await PaymentService.create_payment_intent(user.id, gateway, session)
    return {"success": True, "client_secret": client_secret}


@order_router.post("/place", status_code=status.HTTP_201_CREATED)
async def place_order(payload: PlaceOrderRequest,
                      user: UserDTO = Depends(get_current_user),
                      session: AsyncSession = Depends(get_session),
                      limiter: RateLimiter = Depends(get_rate_limiter)):
    """
    Place an order from the caller's cart.

    Returns:
        201: Order created, cart deleted, stock decremented
        400: Validation / pricing / stock failure (nothing persisted)
        429: Too many orders in the last hour
    """
    correlation_id = generate_correlation_id()
    logger.info(f"[{correlation_id}] Order placement requested by user {user.id}")
    await limiter.enforce(RateLimitOperation.ORDER_PLACE, user.id)
    order = await OrderService.place_order(
        user=user,
        shipping_info=payload.shipping_info.to_dto(),
        payment_info=payload.payment_info.to_dto(),
        items_price=payload.items_price,
        tax_price=payload.tax_price,
        shipping_price=payload.shipping_price,
        total_price=payload.total_price,
        session=session,
    )
    logger.info(f"[{correlation_id}] Order {order.id} placed")
    return {"success": True, "message": "Order placed successfully", "order": order.model_dump(mode="json")}


@order_router.get("/my")
async def my_orders(user: UserDTO = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    orders = await OrderManagementService.get_my_orders(user.id, session)
    return {"success": True, "orders": [order.model_dump(mode="json") for order in orders]}


@order_router.get("/{order_id}")
async def get_order(order_id: int,
                    user: UserDTO = Depends(get_current_user),
                    session: AsyncSession = Depends(get_session)):
    order = await OrderManagementService.get_order(order_id, user, session)
    return {"success": True, "order": order.model_dump(mode="json")}
