# cart is the per-user staging area for intended purchases. Each line keeps a
# price snapshot taken when that line was last touched (added or quantity
# updated); untouched lines keep their old snapshot until the next touch.
#
# note that stock is NOT reserved by the cart, availability is checked again
# during order placement
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, Integer, ForeignKey, Float
from sqlalchemy.orm import relationship

from models.base import Base
from models.cartItem import CartItemDTO


class Cart(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    total_price = Column(Float, nullable=False, default=0.0)

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
        lazy="selectin",
    )


class CartDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    user_id: int | None = None
    items: list[CartItemDTO] = Field(default_factory=list)
    total_price: float = 0.0

    @classmethod
    def empty(cls, user_id: int) -> 'CartDTO':
        """Value object returned for users without a persisted cart."""
        return cls(user_id=user_id)

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0
