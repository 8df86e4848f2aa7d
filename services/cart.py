import logging

from sqlalchemy.ext.asyncio import AsyncSession

from exceptions import (
    CartNotFoundException,
    CartItemNotFoundException,
    InsufficientStockException,
    ProductNotFoundException,
)
from models.cart import Cart, CartDTO
from repositories.cart import CartRepository
from repositories.cartItem import CartItemRepository
from repositories.product import ProductRepository
from services.pricing import PricingService
from utils.transaction_manager import TransactionManager


class CartService:
    """
    Cart Aggregator.

    One cart per user. Every mutation refreshes the price snapshot of the line
    it touches (only that line) and recomputes the cart total before saving.
    """

    @staticmethod
    async def get_cart(user_id: int, session: AsyncSession) -> CartDTO:
        """Returns an empty, unsaved cart when the user has none; reading never creates one."""
        cart = await CartRepository.get_by_user_id(user_id, session)
        if cart is None:
            return CartDTO.empty(user_id)
        return cart

    @staticmethod
    async def add_item(user_id: int, product_id: int, session: AsyncSession, quantity: int = 1) -> CartDTO:
        """
        Add ``quantity`` units of a product, merging with an existing line.

        Raises:
            ProductNotFoundException: If the product does not exist
            InsufficientStockException: If existing + new quantity exceeds stock
        """
        async with TransactionManager.atomic(session):
            product = await ProductRepository.get_model(product_id, session)
            if product is None:
                raise ProductNotFoundException(product_id)

            cart = await CartRepository.get_model(user_id, session)
            if cart is None:
                cart = await CartRepository.create(user_id, session)
                logging.info(f"Cart created for user {user_id}")

            line = CartItemRepository.find_line(cart, product_id)
            requested = quantity + (line.quantity if line is not None else 0)
            if requested > product.stock:
                raise InsufficientStockException(product_id, requested=requested, available=product.stock)

            if line is not None:
                line.quantity = requested
                line.price = product.price
            else:
                CartItemRepository.append_line(cart, product, quantity)

            CartService.recompute_total(cart)
            cart_dto = await CartRepository.save(cart, session)

        logging.info(f"Cart {cart_dto.id}: product {product_id} x{requested} (user {user_id}), total={cart_dto.total_price}")
        return cart_dto

    @staticmethod
    async def set_item_quantity(user_id: int, product_id: int, quantity: int, session: AsyncSession) -> CartDTO:
        """
        Set a line's quantity; zero or less removes the line.

        Raises:
            CartNotFoundException: If the user has no cart
            CartItemNotFoundException: If the product is not in the cart, checked before the quantity
            ProductNotFoundException: If the product does not exist
            InsufficientStockException: If quantity exceeds stock
        """
        async with TransactionManager.atomic(session):
            cart = await CartRepository.get_model(user_id, session)
            if cart is None:
                raise CartNotFoundException(user_id)

            line = CartItemRepository.find_line(cart, product_id)
            if line is None:
                raise CartItemNotFoundException(user_id, product_id)

            if quantity <= 0:
                CartItemRepository.remove_line(cart, line)
            else:
                product = await ProductRepository.get_model(product_id, session)
                if product is None:
                    raise ProductNotFoundException(product_id)
                if quantity > product.stock:
                    raise InsufficientStockException(product_id, requested=quantity, available=product.stock)
                line.quantity = quantity
                line.price = product.price

            CartService.recompute_total(cart)
            cart_dto = await CartRepository.save(cart, session)

        logging.debug(f"Cart {cart_dto.id}: product {product_id} set to {quantity}, total={cart_dto.total_price}")
        return cart_dto

    @staticmethod
    async def remove_item(user_id: int, product_id: int, session: AsyncSession) -> CartDTO:
        async with TransactionManager.atomic(session):
            cart = await CartRepository.get_model(user_id, session)
            if cart is None:
                raise CartNotFoundException(user_id)

            line = CartItemRepository.find_line(cart, product_id)
            if line is None:
                raise CartItemNotFoundException(user_id, product_id)

            CartItemRepository.remove_line(cart, line)
            CartService.recompute_total(cart)
            cart_dto = await CartRepository.save(cart, session)
        return cart_dto

    @staticmethod
    async def clear(user_id: int, session: AsyncSession) -> CartDTO:
        async with TransactionManager.atomic(session):
            cart = await CartRepository.get_model(user_id, session)
            if cart is None:
                return CartDTO.empty(user_id)
            CartItemRepository.clear_lines(cart)
            CartService.recompute_total(cart)
            cart_dto = await CartRepository.save(cart, session)
        logging.info(f"Cart {cart_dto.id} cleared (user {user_id})")
        return cart_dto

    @staticmethod
    def recompute_total(cart: Cart) -> None:
        cart.total_price = PricingService.cart_total(cart.items)
