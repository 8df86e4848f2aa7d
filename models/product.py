from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, CheckConstraint, JSON, Text, func

from models.base import Base


class Product(Base):
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category = Column(String, nullable=False)
    # [{"url": "...", "public_id": "..."}], first entry is the primary image
    images = Column(JSON, nullable=False, default=list)

    # Review aggregate, recomputed by ReviewService on every review mutation
    ratings = Column(Float, nullable=False, default=0.0)
    num_of_reviews = Column(Integer, nullable=False, default=0)

    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint('ratings >= 0 AND ratings <= 5', name='check_ratings_range'),
        CheckConstraint('num_of_reviews >= 0', name='check_num_of_reviews_non_negative'),
    )


class ProductImageDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    url: str
    public_id: str | None = None


class ProductDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    name: str | None = None
    description: str | None = None
    price: float | None = None
    stock: int | None = None
    category: str | None = None
    images: list[ProductImageDTO] = Field(default_factory=list)
    ratings: float = 0.0
    num_of_reviews: int = 0
    user_id: int | None = None
    created_at: datetime | None = None

    @property
    def primary_image(self) -> str:
        return self.images[0].url if self.images else ""


class ProductSummaryDTO(BaseModel):
    """Compact product view handed to the recommendation ranker."""
    id: int
    name: str
    description: str
    category: str
    price: float
    ratings: float

    @classmethod
    def from_product(cls, product: ProductDTO) -> 'ProductSummaryDTO':
        return cls(
            id=product.id,
            name=product.name,
            description=(product.description or "")[:100],
            category=product.category,
            price=product.price,
            ratings=product.ratings,
        )


class ProductPageDTO(BaseModel):
    products: list[ProductDTO] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 0

    @property
    def total_pages(self) -> int:
        if self.per_page <= 0:
            return 1
        return max(1, -(-self.total // self.per_page))
