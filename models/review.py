from datetime import datetime

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, Integer, Float, String, Text, DateTime, ForeignKey, CheckConstraint, Index, func

from models.base import Base


# One review per (user, product). Uniqueness is enforced by lookup-then-upsert
# in ReviewService, not by a table constraint.
class ProductReview(Base):
    __tablename__ = 'product_reviews'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    # Denormalized reviewer name
    name = Column(String, nullable=False)
    rating = Column(Float, nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint('rating >= 1 AND rating <= 5', name='check_review_rating_range'),
        Index('ix_product_reviews_user_product', 'user_id', 'product_id'),
    )


class ProductReviewDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    user_id: int | None = None
    product_id: int | None = None
    name: str | None = None
    rating: float | None = None
    comment: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewWithProductDTO(ProductReviewDTO):
    """Admin listing row: review plus the reviewed product's name."""
    product_name: str | None = None
