"""Request payloads. JSON bodies accept snake_case or camelCase keys."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from enums.user_role import UserRole
from models.order import PaymentInfoDTO, ShippingInfoDTO


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddToCartRequest(RequestModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(RequestModel):
    product_id: int = Field(..., gt=0)
    # <= 0 removes the line
    quantity: int


class WatchlistRequest(RequestModel):
    product_id: int = Field(..., gt=0)


class ShippingInfoPayload(RequestModel):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str | None = None
    country: str = "India"
    pin_code: str = Field(..., min_length=1)
    phone_no: str = Field(..., min_length=1)

    def to_dto(self) -> ShippingInfoDTO:
        return ShippingInfoDTO(**self.model_dump())


class PaymentInfoPayload(RequestModel):
    id: str | None = None
    status: str | None = None
    method: str | None = None

    def to_dto(self) -> PaymentInfoDTO:
        return PaymentInfoDTO(**self.model_dump())


class PlaceOrderRequest(RequestModel):
    shipping_info: ShippingInfoPayload
    payment_info: PaymentInfoPayload
    # Coerced by PricingService (non-numeric -> 0)
    items_price: float | str | None = None
    tax_price: float | str | None = None
    shipping_price: float | str | None = None
    total_price: float | str | None = None


class ReviewRequest(RequestModel):
    rating: float | str | None = None
    comment: str | None = None


class OrderStatusRequest(RequestModel):
    status: str


class ProductImagePayload(RequestModel):
    url: str
    public_id: str | None = None


class ProductCreateRequest(RequestModel):
    name: str
    description: str = ""
    price: float
    stock: int = 0
    category: str
    images: list[ProductImagePayload] = Field(default_factory=list)


class ProductUpdateRequest(RequestModel):
    name: str | None = None
    description: str | None = None
    price: float | None = None
    stock: int | None = None
    category: str | None = None
    images: list[ProductImagePayload] | None = None


class UserRoleRequest(RequestModel):
    role: UserRole


class AIFilterRequest(RequestModel):
    user_query: str

    @field_validator("user_query")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Search query is required")
        return value.strip()


class AIRecommendationRequest(RequestModel):
    user_prompt: str

    @field_validator("user_prompt")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Prompt is required")
        return value.strip()
