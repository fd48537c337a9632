from datetime import datetime

from storefront.schemas.common import Money, ResponseModel


class CustomerSummary(ResponseModel):
    id: str
    name: str
    email: str
    phone: str | None
    created_at: datetime
    order_count: int
    total_spent: Money


class CustomerListData(ResponseModel):
    customers: list[CustomerSummary]
