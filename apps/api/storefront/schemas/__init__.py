from storefront.schemas.cart import CartData, CartItemAdd, CartItemResponse, CartItemUpdate
from storefront.schemas.common import Envelope, MessageEnvelope, PaginationMeta
from storefront.schemas.dashboard import DashboardData, DashboardStats, RecentOrder
from storefront.schemas.order import (
    CheckoutRequest,
    OrderData,
    OrderItemResponse,
    OrderListData,
    OrderResponse,
    OrderStatusUpdate,
)
from storefront.schemas.product import (
    ProductCreate,
    ProductData,
    ProductListData,
    ProductResponse,
    ProductUpdate,
)
from storefront.schemas.tracking import (
    TrackingData,
    TrackingEntryCreate,
    TrackingEntryData,
    TrackingEntryResponse,
    TrackingOrderSummary,
)

__all__ = [
    "Envelope",
    "MessageEnvelope",
    "PaginationMeta",
    "CartData",
    "CartItemAdd",
    "CartItemResponse",
    "CartItemUpdate",
    "CheckoutRequest",
    "OrderData",
    "OrderItemResponse",
    "OrderListData",
    "OrderResponse",
    "OrderStatusUpdate",
    "ProductCreate",
    "ProductData",
    "ProductListData",
    "ProductResponse",
    "ProductUpdate",
    "DashboardData",
    "DashboardStats",
    "RecentOrder",
    "TrackingData",
    "TrackingEntryCreate",
    "TrackingEntryData",
    "TrackingEntryResponse",
    "TrackingOrderSummary",
]
