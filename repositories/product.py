from sqlalchemy import select, update, delete, func, or_

from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from enums.sort_option import SortOption
from models.product import Product, ProductDTO
from models.search import SearchFiltersDTO


class ProductRepository:

    @staticmethod
    async def get_by_id(product_id: int, session: AsyncSession) -> ProductDTO | None:
        # populate_existing: stock is changed through bulk UPDATEs, never trust the identity map
        stmt = select(Product).where(Product.id == product_id).execution_options(populate_existing=True)
        product = await session_execute(stmt, session)
        product = product.scalar()
        if product is None:
            return None
        return ProductDTO.model_validate(product, from_attributes=True)

    @staticmethod
    async def get_model(product_id: int, session: AsyncSession) -> Product | None:
        """ORM instance for attaching to cart lines inside the same unit of work."""
        stmt = select(Product).where(Product.id == product_id).execution_options(populate_existing=True)
        product = await session_execute(stmt, session)
        return product.scalar()

    @staticmethod
    async def get_by_ids(product_ids: list[int], session: AsyncSession) -> dict[int, ProductDTO]:
        """
        Batch load products (eliminates N+1 queries).

        Returns:
            Dict mapping product_id -> ProductDTO
        """
        if not product_ids:
            return {}

        stmt = select(Product).where(Product.id.in_(product_ids)).execution_options(populate_existing=True)
        result = await session_execute(stmt, session)
        products = result.scalars().all()
        return {product.id: ProductDTO.model_validate(product, from_attributes=True) for product in products}

    @staticmethod
    async def get_stock(product_id: int, session: AsyncSession) -> int | None:
        stmt = select(Product.stock).where(Product.id == product_id)
        stock = await session_execute(stmt, session)
        return stock.scalar()

    @staticmethod
    async def decrement_stock_if_available(product_id: int, quantity: int, session: AsyncSession) -> bool:
        """
        Conditional decrement: only succeeds when stock >= quantity.

        Executed as a single UPDATE so two concurrent placements can't both
        take the last units.

        Returns:
            True if the row was updated, False if stock was insufficient (or product gone)
        """
        stmt = (update(Product)
                .where(Product.id == product_id, Product.stock >= quantity)
                .values(stock=Product.stock - quantity)
                .execution_options(synchronize_session=False))
        result = await session_execute(stmt, session)
        return result.rowcount == 1

    @staticmethod
    async def increment_stock(product_id: int, quantity: int, session: AsyncSession) -> None:
        stmt = (update(Product)
                .where(Product.id == product_id)
                .values(stock=Product.stock + quantity)
                .execution_options(synchronize_session=False))
        await session_execute(stmt, session)

    @staticmethod
    async def update_rating(product_id: int, ratings: float, num_of_reviews: int, session: AsyncSession) -> None:
        stmt = (update(Product)
                .where(Product.id == product_id)
                .values(ratings=ratings, num_of_reviews=num_of_reviews)
                .execution_options(synchronize_session=False))
        await session_execute(stmt, session)

    @staticmethod
    async def create(product_dto: ProductDTO, session: AsyncSession) -> int:
        product = Product(**product_dto.model_dump(exclude={'id', 'created_at'}))
        session.add(product)
        await session_flush(session)
        return product.id

    @staticmethod
    async def update(product_id: int, values: dict, session: AsyncSession) -> None:
        if not values:
            return
        stmt = (update(Product)
                .where(Product.id == product_id)
                .values(**values)
                .execution_options(synchronize_session=False))
        await session_execute(stmt, session)

    @staticmethod
    async def delete(product_id: int, session: AsyncSession) -> None:
        stmt = delete(Product).where(Product.id == product_id).execution_options(synchronize_session=False)
        await session_execute(stmt, session)

    @staticmethod
    def _apply_filters(stmt, filters: SearchFiltersDTO, keyword_matches_category: bool):
        if filters.keyword and filters.keyword.strip():
            keyword = filters.keyword.strip()
            conditions = [
                Product.name.icontains(keyword, autoescape=True),
                Product.description.icontains(keyword, autoescape=True),
            ]
            if keyword_matches_category:
                conditions.append(Product.category.icontains(keyword, autoescape=True))
            stmt = stmt.where(or_(*conditions))
        if filters.category and filters.category.strip():
            stmt = stmt.where(Product.category.icontains(filters.category.strip(), autoescape=True))
        if filters.min_price > 0:
            stmt = stmt.where(Product.price >= filters.min_price)
        if filters.max_price > 0:
            stmt = stmt.where(Product.price <= filters.max_price)
        if filters.min_rating > 0:
            stmt = stmt.where(Product.ratings >= filters.min_rating)
        return stmt

    @staticmethod
    def _order_by(stmt, sort_by: str):
        sort_option = SortOption.parse(sort_by)
        if sort_option == SortOption.PRICE:
            return stmt.order_by(Product.price.asc(), Product.id.asc())
        if sort_option == SortOption.PRICE_DESC:
            return stmt.order_by(Product.price.desc(), Product.id.desc())
        if sort_option == SortOption.RATING:
            return stmt.order_by(Product.ratings.desc(), Product.id.desc())
        return stmt.order_by(Product.created_at.desc(), Product.id.desc())

    @staticmethod
    async def search(
        filters: SearchFiltersDTO,
        session: AsyncSession,
        keyword_matches_category: bool = False,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[ProductDTO]:
        stmt = ProductRepository._apply_filters(select(Product), filters, keyword_matches_category)
        stmt = ProductRepository._order_by(stmt, filters.sort_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        result = await session_execute(stmt.execution_options(populate_existing=True), session)
        return [ProductDTO.model_validate(product, from_attributes=True) for product in result.scalars().all()]

    @staticmethod
    async def count(session: AsyncSession, filters: SearchFiltersDTO | None = None) -> int:
        stmt = select(func.count()).select_from(Product)
        if filters is not None:
            stmt = ProductRepository._apply_filters(stmt, filters, keyword_matches_category=False)
        result = await session_execute(stmt, session)
        return result.scalar()

    @staticmethod
    async def get_all(session: AsyncSession) -> list[ProductDTO]:
        stmt = (select(Product)
                .order_by(Product.created_at.desc(), Product.id.desc())
                .execution_options(populate_existing=True))
        result = await session_execute(stmt, session)
        return [ProductDTO.model_validate(product, from_attributes=True) for product in result.scalars().all()]

    @staticmethod
    async def get_distinct_categories(session: AsyncSession) -> list[str]:
        stmt = select(Product.category).distinct().order_by(Product.category)
        result = await session_execute(stmt, session)
        return list(result.scalars().all())

    @staticmethod
    async def get_low_stock(threshold: int, session: AsyncSession) -> list[ProductDTO]:
        stmt = (select(Product)
                .where(Product.stock <= threshold)
                .order_by(Product.stock.asc(), Product.id.asc())
                .execution_options(populate_existing=True))
        result = await session_execute(stmt, session)
        return [ProductDTO.model_validate(product, from_attributes=True) for product in result.scalars().all()]
