from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, String, JSON, func, CheckConstraint
from sqlalchemy.orm import relationship

from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from models.base import Base
from models.orderItem import OrderItemDTO


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, unique=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    # Shipping snapshot as submitted at placement:
    # {"address", "city", "state", "country", "pin_code", "phone_no"}
    shipping_info = Column(JSON, nullable=False)

    # Payment Fields
    payment_id = Column(String, nullable=False, default="")
    payment_status = Column(String(10), nullable=False, default=PaymentStatus.PENDING.value)
    payment_method = Column(String(10), nullable=False)

    # Price breakdown, validated at placement (total == items + tax + shipping)
    items_price = Column(Float, nullable=False, default=0.0)
    tax_price = Column(Float, nullable=False, default=0.0)
    shipping_price = Column(Float, nullable=False, default=0.0)
    total_price = Column(Float, nullable=False, default=0.0)

    paid_at = Column(DateTime, nullable=True)
    # Only order_status and delivered_at change after placement
    order_status = Column(String(20), nullable=False, default=OrderStatus.PROCESSING.value)
    delivered_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now())

    items = relationship(
        'OrderItem',
        back_populates='order',
        cascade='all, delete-orphan',
        order_by='OrderItem.id',
        lazy='selectin',
    )

    __table_args__ = (
        CheckConstraint('items_price >= 0', name='check_order_items_price_non_negative'),
        CheckConstraint('tax_price >= 0', name='check_order_tax_price_non_negative'),
        CheckConstraint('shipping_price >= 0', name='check_order_shipping_price_non_negative'),
        CheckConstraint('total_price >= 0', name='check_order_total_price_non_negative'),
    )


class ShippingInfoDTO(BaseModel):
    address: str
    city: str
    state: str | None = None
    country: str = "India"
    pin_code: str
    phone_no: str


class PaymentInfoDTO(BaseModel):
    """Raw payment info as submitted by the client; validated by OrderService."""
    id: str | None = None
    status: str | None = None
    method: str | None = None


class OrderDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    user_id: int | None = None
    shipping_info: ShippingInfoDTO | None = None
    payment_id: str = ""
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod | None = None
    items: list[OrderItemDTO] = Field(default_factory=list)
    items_price: float = 0.0
    tax_price: float = 0.0
    shipping_price: float = 0.0
    total_price: float = 0.0
    paid_at: datetime | None = None
    order_status: OrderStatus = OrderStatus.PROCESSING
    delivered_at: datetime | None = None
    created_at: datetime | None = None
