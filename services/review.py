import logging

from sqlalchemy.ext.asyncio import AsyncSession

from exceptions import (
    ForbiddenException,
    InvalidReviewException,
    ProductNotFoundException,
    PurchaseRequiredException,
    ReviewNotFoundException,
)
from models.review import ProductReviewDTO, ReviewWithProductDTO
from models.user import UserDTO
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from repositories.review import ReviewRepository
from services.pricing import PricingService
from utils.transaction_manager import TransactionManager

MIN_RATING = 1
MAX_RATING = 5


class ReviewService:
    """
    Review Aggregator.

    At most one review per (user, product), enforced by lookup-then-upsert.
    Product.ratings / num_of_reviews are recomputed from all reviews after
    every create, update and delete.
    """

    @staticmethod
    def _validate(rating, comment) -> tuple[float, str]:
        rating = PricingService.coerce_price(rating)
        if rating < MIN_RATING or rating > MAX_RATING:
            raise InvalidReviewException(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        if comment is None or not str(comment).strip():
            raise InvalidReviewException("Comment is required")
        return rating, str(comment).strip()

    @staticmethod
    async def upsert_review(user: UserDTO,
                            product_id: int,
                            rating,
                            comment,
                            session: AsyncSession) -> tuple[ProductReviewDTO, bool]:
        """
        Create the user's review for a product, or update it in place.

        Returns:
            (review, created) where created is False for an in-place update

        Raises:
            InvalidReviewException: Rating outside 1..5 or empty comment
            ProductNotFoundException: Product doesn't exist
            PurchaseRequiredException: No Shipped/Delivered order contains the product
        """
        rating, comment = ReviewService._validate(rating, comment)

        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)

        if not await OrderRepository.has_received_product(user.id, product_id, session):
            raise PurchaseRequiredException(user.id, product_id)

        async with TransactionManager.atomic(session):
            existing = await ReviewRepository.get_by_user_and_product(user.id, product_id, session)
            if existing is not None:
                await ReviewRepository.update(existing.id, rating, comment, session)
                review_id = existing.id
                created = False
            else:
                review_id = await ReviewRepository.create(ProductReviewDTO(
                    user_id=user.id,
                    product_id=product_id,
                    name=user.name,
                    rating=rating,
                    comment=comment,
                ), session)
                created = True
            await ReviewService.recompute_rating(product_id, session)

        logging.info(f"Review {review_id} {'created' if created else 'updated'}: "
                     f"user={user.id}, product={product_id}, rating={rating}")
        return await ReviewRepository.get_by_id(review_id, session), created

    @staticmethod
    async def delete_review(product_id: int, review_id: int, requester: UserDTO, session: AsyncSession) -> None:
        """
        Raises:
            ProductNotFoundException, ReviewNotFoundException,
            ForbiddenException: Requester is neither the author nor an admin
        """
        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)

        review = await ReviewRepository.get_by_id(review_id, session)
        if review is None or review.product_id != product_id:
            raise ReviewNotFoundException(review_id)

        if review.user_id != requester.id and not requester.is_admin:
            raise ForbiddenException("Not authorized to delete this review", user_id=requester.id)

        async with TransactionManager.atomic(session):
            await ReviewRepository.delete(review_id, session)
            await ReviewService.recompute_rating(product_id, session)

        logging.info(f"Review {review_id} deleted from product {product_id} by user {requester.id}")

    @staticmethod
    async def recompute_rating(product_id: int, session: AsyncSession) -> tuple[float, int]:
        """Average of all ratings (0 with no reviews) written back to the product. Does not commit."""
        ratings = await ReviewRepository.get_ratings(product_id, session)
        num_of_reviews = len(ratings)
        average = sum(ratings) / num_of_reviews if num_of_reviews > 0 else 0.0
        await ProductRepository.update_rating(product_id, average, num_of_reviews, session)
        logging.debug(f"Product {product_id} rating recomputed: {average:.2f} over {num_of_reviews} reviews")
        return average, num_of_reviews

    @staticmethod
    async def get_product_reviews(product_id: int, session: AsyncSession) -> list[ProductReviewDTO]:
        return await ReviewRepository.get_by_product_id(product_id, session)

    @staticmethod
    async def list_all_reviews(session: AsyncSession) -> list[ReviewWithProductDTO]:
        return await ReviewRepository.get_all_with_product(session)
