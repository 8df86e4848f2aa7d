from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from models.product import Product
from models.review import ProductReview, ProductReviewDTO, ReviewWithProductDTO


class ReviewRepository:
    @staticmethod
    async def get_by_id(review_id: int, session: AsyncSession) -> ProductReviewDTO | None:
        stmt = select(ProductReview).where(ProductReview.id == review_id).execution_options(populate_existing=True)
        review = await session_execute(stmt, session)
        review = review.scalar()
        if review is None:
            return None
        return ProductReviewDTO.model_validate(review, from_attributes=True)

    @staticmethod
    async def get_by_user_and_product(user_id: int, product_id: int, session: AsyncSession) -> ProductReviewDTO | None:
        stmt = select(ProductReview).where(ProductReview.user_id == user_id,
                                           ProductReview.product_id == product_id).execution_options(populate_existing=True)
        review = await session_execute(stmt, session)
        review = review.scalars().first()
        if review is None:
            return None
        return ProductReviewDTO.model_validate(review, from_attributes=True)

    @staticmethod
    async def get_by_product_id(product_id: int, session: AsyncSession) -> list[ProductReviewDTO]:
        stmt = (select(ProductReview)
                .where(ProductReview.product_id == product_id)
                .order_by(ProductReview.created_at.desc(), ProductReview.id.desc())
                .execution_options(populate_existing=True))
        reviews = await session_execute(stmt, session)
        return [ProductReviewDTO.model_validate(review, from_attributes=True) for review in reviews.scalars().all()]

    @staticmethod
    async def get_ratings(product_id: int, session: AsyncSession) -> list[float]:
        stmt = select(ProductReview.rating).where(ProductReview.product_id == product_id)
        ratings = await session_execute(stmt, session)
        return list(ratings.scalars().all())

    @staticmethod
    async def get_all_with_product(session: AsyncSession) -> list[ReviewWithProductDTO]:
        stmt = (select(ProductReview, Product.name)
                .join(Product, Product.id == ProductReview.product_id)
                .order_by(ProductReview.created_at.desc(), ProductReview.id.desc()))
        rows = await session_execute(stmt, session)
        result = []
        for review, product_name in rows.all():
            dto = ReviewWithProductDTO.model_validate(review, from_attributes=True)
            dto.product_name = product_name
            result.append(dto)
        return result

    @staticmethod
    async def create(review_dto: ProductReviewDTO, session: AsyncSession) -> int:
        review = ProductReview(**review_dto.model_dump(exclude={'id', 'created_at', 'updated_at'}))
        session.add(review)
        await session_flush(session)
        return review.id

    @staticmethod
    async def update(review_id: int, rating: float, comment: str, session: AsyncSession) -> None:
        stmt = (update(ProductReview)
                .where(ProductReview.id == review_id)
                .values(rating=rating, comment=comment)
                .execution_options(synchronize_session=False))
        await session_execute(stmt, session)

    @staticmethod
    async def delete(review_id: int, session: AsyncSession) -> None:
        stmt = delete(ProductReview).where(ProductReview.id == review_id).execution_options(synchronize_session=False)
        await session_execute(stmt, session)

    @staticmethod
    async def get_product_ids_by_user(user_id: int, session: AsyncSession) -> list[int]:
        stmt = select(ProductReview.product_id).where(ProductReview.user_id == user_id).distinct()
        product_ids = await session_execute(stmt, session)
        return list(product_ids.scalars().all())
