from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from storefront.schemas.common import Money, PaginationMeta, ResponseModel


class CheckoutRequest(BaseModel):
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str | None = Field(default=None, max_length=50)
    shipping_address: str | None = Field(default=None, max_length=1000)

    @field_validator("customer_name", "customer_phone", "shipping_address")
    @classmethod
    def strip_strings(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip()


class OrderStatusUpdate(BaseModel):
    status: str = Field(min_length=1, max_length=32)

    @field_validator("status")
    @classmethod
    def strip_status(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("status must not be blank")
        return value


class OrderItemResponse(ResponseModel):
    id: int
    product_id: str | None
    product_name: str
    product_price: Money
    quantity: int
    total_price: Money


class OrderResponse(ResponseModel):
    id: str
    user_id: str | None
    customer_name: str
    customer_email: str | None
    customer_phone: str | None
    shipping_address: str | None
    status: str
    total_amount: Money
    created_at: datetime
    updated_at: datetime
    order_items: list[OrderItemResponse] = Field(default_factory=list, validation_alias="items")


class OrderData(ResponseModel):
    order: OrderResponse


class OrderListData(ResponseModel):
    orders: list[OrderResponse]
    pagination: PaginationMeta | None = None
