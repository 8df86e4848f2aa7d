import logging
from datetime import datetime

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush, session_refresh
from enums.order_status import OrderStatus
from models.order import Order, OrderDTO
from models.orderItem import OrderItem, OrderItemDTO

logger = logging.getLogger(__name__)


class OrderRepository:
    @staticmethod
    async def create(order_dto: OrderDTO, session: AsyncSession) -> OrderDTO:
        order = Order(
            user_id=order_dto.user_id,
            shipping_info=order_dto.shipping_info.model_dump(),
            payment_id=order_dto.payment_id,
            payment_status=order_dto.payment_status.value,
            payment_method=order_dto.payment_method.value,
            items_price=order_dto.items_price,
            tax_price=order_dto.tax_price,
            shipping_price=order_dto.shipping_price,
            total_price=order_dto.total_price,
            paid_at=order_dto.paid_at,
            order_status=order_dto.order_status.value,
            items=[OrderItemRepository.to_model(item) for item in order_dto.items],
        )
        session.add(order)
        await session_flush(session)
        # created_at is generated by the database
        await session_refresh(session, order)
        logger.debug(f"Order {order.id} flushed with {len(order.items)} items")
        return OrderDTO.model_validate(order, from_attributes=True)

    @staticmethod
    async def get_by_id(order_id: int, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is None:
            return None
        return OrderDTO.model_validate(order, from_attributes=True)

    @staticmethod
    async def get_by_user_id(user_id: int, session: AsyncSession) -> list[OrderDTO]:
        stmt = (select(Order)
                .where(Order.user_id == user_id)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .execution_options(populate_existing=True))
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def get_all(session: AsyncSession) -> list[OrderDTO]:
        stmt = (select(Order)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .execution_options(populate_existing=True))
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def get_total_amount(session: AsyncSession) -> float:
        stmt = select(func.coalesce(func.sum(Order.total_price), 0.0))
        result = await session_execute(stmt, session)
        return float(result.scalar())

    @staticmethod
    async def update_status(order_id: int,
                            status: OrderStatus,
                            delivered_at: datetime | None,
                            session: AsyncSession) -> None:
        values = {"order_status": status.value}
        if delivered_at is not None:
            values["delivered_at"] = delivered_at
        stmt = (update(Order)
                .where(Order.id == order_id)
                .values(**values)
                .execution_options(synchronize_session=False))
        await session_execute(stmt, session)

    @staticmethod
    async def delete(order_id: int, session: AsyncSession) -> None:
        # order_items are removed by the FK cascade
        stmt = delete(Order).where(Order.id == order_id).execution_options(synchronize_session=False)
        await session_execute(stmt, session)

    @staticmethod
    async def has_received_product(user_id: int, product_id: int, session: AsyncSession) -> bool:
        """True if the user owns an order containing the product that has left the warehouse."""
        stmt = (select(func.count(OrderItem.id))
                .join(Order, Order.id == OrderItem.order_id)
                .where(Order.user_id == user_id,
                       OrderItem.product_id == product_id,
                       Order.order_status.in_([OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value])))
        result = await session_execute(stmt, session)
        return result.scalar() > 0


class OrderItemRepository:
    @staticmethod
    def to_model(order_item_dto: OrderItemDTO) -> OrderItem:
        return OrderItem(**order_item_dto.model_dump(exclude={'id', 'order_id'}))
