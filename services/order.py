from datetime import datetime
import logging

from sqlalchemy.ext.asyncio import AsyncSession

import config
from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from exceptions import (
    EmptyCartException,
    InvalidPaymentMethodException,
    MissingPaymentReferenceException,
    OutOfStockException,
)
from models.cartItem import CartItemDTO
from models.order import OrderDTO, PaymentInfoDTO, ShippingInfoDTO
from models.orderItem import OrderItemDTO
from models.user import UserDTO
from repositories.cart import CartRepository
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from services.inventory import InventoryService
from services.pricing import PricingService
from utils.transaction_manager import TransactionManager


class OrderService:

    @staticmethod
    @TransactionManager.with_retry()
    async def place_order(
        user: UserDTO,
        shipping_info: ShippingInfoDTO,
        payment_info: PaymentInfoDTO,
        items_price,
        tax_price,
        shipping_price,
        total_price,
        session: AsyncSession
    ) -> OrderDTO:
        """
        Turns the user's cart into an order.

        Flow:
        1. Validate payment method / reference, normalize payment status
        2. Coerce price fields, reject negatives
        3. Verify total == items + tax + shipping (within tolerance)
        4. Load cart (must exist and be non-empty)
        5. Copy cart lines into immutable order items
        6. Pre-check stock for every item (no mutation yet)
        7. paid_at = now for gateway payments
        8-10. In one transaction: insert order, conditionally decrement stock
              per item, delete the cart

        Any failure rolls the whole transaction back; no partial order is persisted.

        Raises:
            InvalidPaymentMethodException, MissingPaymentReferenceException,
            InvalidPricingException, PriceMismatchException, EmptyCartException,
            OutOfStockException
        """
        # 1. Payment
        payment_method, payment_status = OrderService._validate_payment(payment_info)

        # 2-3. Prices
        items_price, tax_price, shipping_price, total_price = PricingService.validate_price_fields(
            items_price, tax_price, shipping_price, total_price
        )
        PricingService.verify_total(items_price, tax_price, shipping_price, total_price)

        # 4. Cart
        cart = await CartRepository.get_by_user_id(user.id, session)
        if cart is None or cart.is_empty:
            raise EmptyCartException(user.id)
        if config.ORDER_VERIFY_ITEMS_PRICE:
            PricingService.verify_items_price(items_price, PricingService.cart_total(cart.items))

        # 5. Snapshot lines
        order_items = [OrderService._to_order_item(cart_item) for cart_item in cart.items]

        # 6. Stock pre-check over all items before any mutation
        await OrderService._check_stock(order_items, session)

        # 7. Payment timestamp
        paid_at = datetime.now() if payment_method == PaymentMethod.GATEWAY else None

        order_dto = OrderDTO(
            user_id=user.id,
            shipping_info=shipping_info,
            payment_id=payment_info.id or "",
            payment_status=payment_status,
            payment_method=payment_method,
            items=order_items,
            items_price=items_price,
            tax_price=tax_price,
            shipping_price=shipping_price,
            total_price=total_price,
            paid_at=paid_at,
            order_status=OrderStatus.PROCESSING,
        )

        # 8-10. Atomic write
        async with TransactionManager.atomic(session):
            created = await OrderRepository.create(order_dto, session)
            for item in order_items:
                if not await InventoryService.decrement(item.product_id, item.quantity, session):
                    available = await ProductRepository.get_stock(item.product_id, session)
                    raise OutOfStockException(item.product_id, item.name, item.quantity, available or 0)
            cart_model = await CartRepository.get_model(user.id, session)
            if cart_model is not None:
                await CartRepository.delete(cart_model, session)

        logging.info(f"✅ Order {created.id} placed by user {user.id}: {len(order_items)} items, "
                     f"total={created.total_price}, method={payment_method.value}, payment={payment_status.value}")
        return created

    @staticmethod
    def _validate_payment(payment_info: PaymentInfoDTO) -> tuple[PaymentMethod, PaymentStatus]:
        try:
            payment_method = PaymentMethod(payment_info.method)
        except ValueError:
            raise InvalidPaymentMethodException(payment_info.method)

        if payment_method.is_deferred:
            # Money has not moved yet whatever the client claims
            return payment_method, PaymentStatus.PENDING

        if not payment_info.id or not payment_info.id.strip():
            raise MissingPaymentReferenceException(payment_method.value)
        return payment_method, PaymentStatus.from_client(payment_info.status)

    @staticmethod
    def _to_order_item(cart_item: CartItemDTO) -> OrderItemDTO:
        product = cart_item.product
        return OrderItemDTO(
            product_id=cart_item.product_id,
            name=product.name if product else "",
            price=cart_item.price,
            quantity=cart_item.quantity,
            image=product.primary_image if product else "",
        )

    @staticmethod
    async def _check_stock(order_items: list[OrderItemDTO], session: AsyncSession) -> None:
        products = await ProductRepository.get_by_ids([item.product_id for item in order_items], session)
        for item in order_items:
            product = products.get(item.product_id)
            available = product.stock if product is not None else 0
            if product is None or available < item.quantity:
                name = product.name if product is not None else item.name
                logging.warning(f"Order pre-check failed: product {item.product_id} ({name}) "
                                f"requested={item.quantity}, available={available}")
                raise OutOfStockException(item.product_id, name, item.quantity, available)
