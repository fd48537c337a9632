from datetime import datetime

from pydantic import BaseModel, Field

from storefront.schemas.common import Money, ResponseModel


class TrackingOrderSummary(ResponseModel):
    id: str
    status: str
    total_amount: Money
    created_at: datetime
    customer_name: str
    customer_phone: str | None


class TrackingEntryResponse(ResponseModel):
    id: int
    order_id: str
    status: str
    description: str
    created_at: datetime


class TrackingData(ResponseModel):
    order: TrackingOrderSummary
    tracking_history: list[TrackingEntryResponse] = Field(alias="trackingHistory")


class TrackingEntryCreate(BaseModel):
    status: str = Field(min_length=1, max_length=32)
    description: str = Field(min_length=1, max_length=2000)


class TrackingEntryData(ResponseModel):
    tracking: TrackingEntryResponse
