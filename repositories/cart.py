from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from models.cart import Cart, CartDTO
from models.cartItem import CartItem


class CartRepository:
    """
    Cart aggregate access.

    Carts are mutated as ORM objects (lines are appended / removed on the
    ``items`` collection and flushed) so the delete-orphan cascade keeps
    cart_items consistent with the in-memory aggregate.
    """

    @staticmethod
    async def get_model(user_id: int, session: AsyncSession) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id).execution_options(populate_existing=True)
        cart = await session_execute(stmt, session)
        return cart.scalar()

    @staticmethod
    async def get_by_user_id(user_id: int, session: AsyncSession) -> CartDTO | None:
        cart = await CartRepository.get_model(user_id, session)
        if cart is None:
            return None
        return CartDTO.model_validate(cart, from_attributes=True)

    @staticmethod
    async def create(user_id: int, session: AsyncSession) -> Cart:
        cart = Cart(user_id=user_id, total_price=0.0, items=[])
        session.add(cart)
        await session_flush(session)
        return cart

    @staticmethod
    async def save(cart: Cart, session: AsyncSession) -> CartDTO:
        await session_flush(session)
        return CartDTO.model_validate(cart, from_attributes=True)

    @staticmethod
    async def delete(cart: Cart, session: AsyncSession) -> None:
        await session.delete(cart)
        await session_flush(session)

    @staticmethod
    async def get_models_with_product(product_id: int, session: AsyncSession) -> list[Cart]:
        stmt = (select(Cart)
                .join(CartItem, CartItem.cart_id == Cart.id)
                .where(CartItem.product_id == product_id)
                .execution_options(populate_existing=True))
        carts = await session_execute(stmt, session)
        return list(carts.scalars().unique().all())
