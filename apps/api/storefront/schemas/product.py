from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from storefront.schemas.common import Money, PaginationMeta, ResponseModel


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    category: str | None = Field(default=None, max_length=100)
    stock: int = Field(default=0, ge=0)
    image_url: str | None = Field(default=None, max_length=1024)

    @field_validator("name", "category")
    @classmethod
    def strip_strings(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip()


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    category: str | None = Field(default=None, max_length=100)
    stock: int | None = Field(default=None, ge=0)
    image_url: str | None = Field(default=None, max_length=1024)


class ProductResponse(ResponseModel):
    id: str
    name: str
    description: str | None
    price: Money
    category: str | None
    stock: int
    image_url: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductData(ResponseModel):
    product: ProductResponse


class ProductListData(ResponseModel):
    products: list[ProductResponse]
    pagination: PaginationMeta | None = None


class CategoryListData(ResponseModel):
    categories: list[str]
