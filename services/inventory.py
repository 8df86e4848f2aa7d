import logging

from sqlalchemy.ext.asyncio import AsyncSession

from exceptions import ProductNotFoundException
from repositories.product import ProductRepository

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Per-product stock ledger.

    Stock only moves through these methods; the decrement is conditional on
    availability so it can never drive stock below zero.
    """

    @staticmethod
    async def get_available(product_id: int, session: AsyncSession) -> int:
        stock = await ProductRepository.get_stock(product_id, session)
        if stock is None:
            raise ProductNotFoundException(product_id)
        return stock

    @staticmethod
    async def check_available(product_id: int, quantity: int, session: AsyncSession) -> bool:
        stock = await ProductRepository.get_stock(product_id, session)
        return stock is not None and stock >= quantity

    @staticmethod
    async def decrement(product_id: int, quantity: int, session: AsyncSession) -> bool:
        """
        Decrement stock if (and only if) enough units are available.

        Does not commit; runs inside the caller's transaction.

        Returns:
            True if stock was decremented, False if it was insufficient
        """
        decremented = await ProductRepository.decrement_stock_if_available(product_id, quantity, session)
        if decremented:
            logger.info(f"Stock decremented: product={product_id}, quantity={quantity}")
        else:
            logger.warning(f"Stock decrement refused: product={product_id}, quantity={quantity}")
        return decremented

    @staticmethod
    async def restock(product_id: int, quantity: int, session: AsyncSession) -> None:
        await ProductRepository.increment_stock(product_id, quantity, session)
        logger.info(f"Stock restored: product={product_id}, quantity={quantity}")
