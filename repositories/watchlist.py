from sqlalchemy import select, delete, exists

from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from models.product import Product, ProductDTO
from models.watchlist import WatchlistEntry


class WatchlistRepository:

    @staticmethod
    async def contains(user_id: int, product_id: int, session: AsyncSession) -> bool:
        stmt = select(exists().where(WatchlistEntry.user_id == user_id,
                                     WatchlistEntry.product_id == product_id))
        result = await session_execute(stmt, session)
        return result.scalar()

    @staticmethod
    async def add(user_id: int, product_id: int, session: AsyncSession) -> None:
        session.add(WatchlistEntry(user_id=user_id, product_id=product_id))
        await session_flush(session)

    @staticmethod
    async def remove(user_id: int, product_id: int, session: AsyncSession) -> None:
        stmt = delete(WatchlistEntry).where(WatchlistEntry.user_id == user_id,
                                            WatchlistEntry.product_id == product_id)
        await session_execute(stmt, session)

    @staticmethod
    async def get_products(user_id: int, session: AsyncSession) -> list[ProductDTO]:
        """Watched products, oldest entry first."""
        stmt = (select(Product)
                .join(WatchlistEntry, WatchlistEntry.product_id == Product.id)
                .where(WatchlistEntry.user_id == user_id)
                .order_by(WatchlistEntry.created_at, Product.id)
                .execution_options(populate_existing=True))
        result = await session_execute(stmt, session)
        return [ProductDTO.model_validate(product, from_attributes=True) for product in result.scalars().all()]
