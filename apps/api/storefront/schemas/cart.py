from pydantic import BaseModel, Field

from storefront.schemas.common import Money, ResponseModel
from storefront.schemas.product import ProductResponse


class CartItemAdd(BaseModel):
    product_id: str = Field(min_length=1, max_length=64)
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int = Field(ge=1)


class CartItemResponse(ResponseModel):
    id: int
    product_id: str
    quantity: int
    product: ProductResponse
    subtotal: Money


class CartData(ResponseModel):
    cart_items: list[CartItemResponse] = Field(alias="cartItems")
    total: Money
