from datetime import datetime

from pydantic import Field

from storefront.schemas.common import Money, ResponseModel


class DashboardStats(ResponseModel):
    total_products: int = Field(alias="totalProducts")
    total_orders: int = Field(alias="totalOrders")
    total_revenue: Money = Field(alias="totalRevenue")
    pending_orders: int = Field(alias="pendingOrders")


class RecentOrder(ResponseModel):
    id: str
    customer_name: str
    total_amount: Money
    status: str
    created_at: datetime


class DashboardData(ResponseModel):
    stats: DashboardStats
    recent_orders: list[RecentOrder] = Field(alias="recentOrders")
