from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, Integer, Float, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base import Base


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)
    # Snapshot of Product.price at the last touch of this line
    price = Column(Float, nullable=False)

    cart = relationship("Cart", back_populates="items")
    product = relationship("Product", lazy="joined")

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
        UniqueConstraint('cart_id', 'product_id', name='uq_cart_items_cart_product'),
    )


class CartProductDTO(BaseModel):
    """Product fields populated into cart responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float
    images: list[dict] = []

    @property
    def primary_image(self) -> str:
        return self.images[0].get("url", "") if self.images else ""


class CartItemDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    cart_id: int | None = None
    product_id: int | None = None
    quantity: int | None = None
    price: float | None = None
    product: CartProductDTO | None = None
