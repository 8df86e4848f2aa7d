"""
Order Lifecycle Manager.

Owns orders after placement: status transitions, deletion and read access.
Only order_status and delivered_at ever change on a placed order.
"""

from datetime import datetime
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from enums.order_status import OrderStatus
from exceptions import (
    AlreadyDeliveredException,
    InvalidOrderStatusException,
    OrderNotFoundException,
    OrderOwnershipException,
)
from models.order import OrderDTO
from models.user import UserDTO
from repositories.order import OrderRepository
from services.inventory import InventoryService
from utils.order_state_machine import OrderStateMachine
from utils.transaction_manager import TransactionManager


class OrderManagementService:

    @staticmethod
    async def set_status(order_id: int, new_status: str, session: AsyncSession, admin_id: int | None = None) -> None:
        """
        Advance an order along Processing -> Shipped -> Delivered.

        Raises:
            OrderNotFoundException: Order doesn't exist
            AlreadyDeliveredException: Order is already Delivered (checked before anything else)
            InvalidOrderStatusException: Unknown status string or transition not allowed
        """
        order = await OrderRepository.get_by_id(order_id, session)
        if order is None:
            raise OrderNotFoundException(order_id)

        if OrderStateMachine.is_final_status(order.order_status):
            raise AlreadyDeliveredException(order_id)

        try:
            target_status = OrderStatus.from_string(new_status)
        except ValueError:
            raise InvalidOrderStatusException(order_id, order.order_status.value, str(new_status))

        if not OrderStateMachine.validate_and_log_transition(order_id, order.order_status, target_status, admin_id):
            raise InvalidOrderStatusException(order_id, order.order_status.value, target_status.value)

        delivered_at = datetime.now() if target_status == OrderStatus.DELIVERED else None
        async with TransactionManager.atomic(session):
            await OrderRepository.update_status(order_id, target_status, delivered_at, session)

    @staticmethod
    async def delete_order(order_id: int, session: AsyncSession, restock: bool = False) -> None:
        """
        Delete an order regardless of its status.

        Stock is only given back when ``restock`` is set; items whose product
        no longer exists are skipped.
        """
        order = await OrderRepository.get_by_id(order_id, session)
        if order is None:
            raise OrderNotFoundException(order_id)

        async with TransactionManager.atomic(session):
            if restock:
                for item in order.items:
                    if item.product_id is not None:
                        await InventoryService.restock(item.product_id, item.quantity, session)
            await OrderRepository.delete(order_id, session)

        logging.info(f"Order {order_id} deleted (status={order.order_status.value}, restock={restock})")

    @staticmethod
    async def get_my_orders(user_id: int, session: AsyncSession) -> list[OrderDTO]:
        return await OrderRepository.get_by_user_id(user_id, session)

    @staticmethod
    async def get_order(order_id: int, requester: UserDTO, session: AsyncSession) -> OrderDTO:
        order = await OrderRepository.get_by_id(order_id, session)
        if order is None:
            raise OrderNotFoundException(order_id)
        if order.user_id != requester.id and not requester.is_admin:
            raise OrderOwnershipException(order_id, requester.id)
        return order

    @staticmethod
    async def list_all_orders(session: AsyncSession) -> tuple[list[OrderDTO], float]:
        """All orders newest first, plus the sum of their totals."""
        orders = await OrderRepository.get_all(session)
        total_amount = await OrderRepository.get_total_amount(session)
        return orders, round(total_amount, 2)
