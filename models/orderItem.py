from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, Integer, String, Float, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base import Base


# OrderItem is an immutable copy of a cart line taken at placement time.
# Name, price and image are never re-derived from the product afterwards.
class OrderItem(Base):
    __tablename__ = 'order_items'

    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_order_item_positive_quantity'),
        CheckConstraint('price >= 0', name='ck_order_item_non_negative_price'),
        Index('ix_order_items_order_id', 'order_id'),
        Index('ix_order_items_product_id', 'product_id'),
    )

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    # Kept nullable so deleting a product never rewrites order history
    product_id = Column(Integer, ForeignKey('products.id', ondelete='SET NULL'), nullable=True)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    image = Column(String, nullable=False, default="")

    order = relationship("Order", back_populates="items")


class OrderItemDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    order_id: int | None = None
    product_id: int | None = None
    name: str
    price: float
    quantity: int
    image: str = ""
