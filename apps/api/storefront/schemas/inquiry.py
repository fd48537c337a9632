from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from storefront.schemas.common import ResponseModel


class InquiryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    subject: str | None = Field(default=None, max_length=255)
    order_id: str | None = Field(default=None, max_length=64)
    message: str = Field(min_length=1, max_length=5000)


class InquiryResponse(ResponseModel):
    id: str
    name: str
    email: str
    phone: str | None
    subject: str | None
    order_id: str | None
    message: str
    status: str
    created_at: datetime


class InquiryData(ResponseModel):
    inquiry: InquiryResponse


class InquiryListData(ResponseModel):
    inquiries: list[InquiryResponse]
