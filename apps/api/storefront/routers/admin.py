from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.auth.dependencies import require_admin
from storefront.config import settings
from storefront.db.session import SessionFactory, get_db, get_session_factory
from storefront.observability import metrics_store
from storefront.schemas.common import Envelope, MessageEnvelope, PaginationMeta
from storefront.schemas.customer import CustomerListData
from storefront.schemas.dashboard import DashboardData
from storefront.schemas.inquiry import InquiryListData, InquiryResponse
from storefront.schemas.metrics import MetricsResponse
from storefront.schemas.order import OrderData, OrderListData, OrderResponse, OrderStatusUpdate
from storefront.schemas.product import ProductCreate, ProductData, ProductResponse, ProductUpdate
from storefront.services.customers_service import list_customers
from storefront.services.dashboard_service import get_dashboard_stats
from storefront.services.inquiries_service import list_inquiries
from storefront.services.order_status_service import update_order_status
from storefront.services.orders_service import list_orders
from storefront.services.products_service import (
    create_product,
    deactivate_product,
    update_product,
)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/dashboard", response_model=Envelope[DashboardData], summary="Dashboard statistics")
def dashboard_endpoint(
    session_factory: SessionFactory = Depends(get_session_factory),
) -> Envelope[DashboardData]:
    return Envelope(data=get_dashboard_stats(session_factory))


@router.post(
    "/products",
    response_model=Envelope[ProductData],
    status_code=201,
    summary="Create product",
)
def create_product_endpoint(
    payload: ProductCreate,
    db: Session = Depends(get_db),
) -> Envelope[ProductData]:
    product = create_product(db, payload)
    return Envelope(
        message="Product created successfully",
        data=ProductData(product=ProductResponse.model_validate(product)),
    )


@router.put("/products/{product_id}", response_model=Envelope[ProductData], summary="Update product")
def update_product_endpoint(
    product_id: str,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
) -> Envelope[ProductData]:
    product = update_product(db, product_id, payload)
    return Envelope(
        message="Product updated successfully",
        data=ProductData(product=ProductResponse.model_validate(product)),
    )


@router.delete("/products/{product_id}", response_model=MessageEnvelope, summary="Delete product")
def delete_product_endpoint(
    product_id: str,
    db: Session = Depends(get_db),
) -> MessageEnvelope:
    deactivate_product(db, product_id)
    return MessageEnvelope(message="Product deleted successfully")


@router.get("/orders", response_model=Envelope[OrderListData], summary="List orders")
def list_orders_endpoint(
    db: Session = Depends(get_db),
    status: str | None = Query(default=None),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.max_page_limit),
) -> Envelope[OrderListData]:
    orders, total = list_orders(db, page=page, limit=limit, status_filter=status, search=search)
    return Envelope(
        data=OrderListData(
            orders=[OrderResponse.model_validate(order) for order in orders],
            pagination=PaginationMeta(page=page, limit=limit, total=total),
        )
    )


@router.patch(
    "/orders/{order_id}/status",
    response_model=Envelope[OrderData],
    summary="Update order status",
)
def update_order_status_endpoint(
    order_id: str,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
) -> Envelope[OrderData]:
    order = update_order_status(db, order_id, payload.status)
    return Envelope(
        message="Order status updated successfully",
        data=OrderData(order=OrderResponse.model_validate(order)),
    )


@router.get("/customers", response_model=Envelope[CustomerListData], summary="List customers")
def list_customers_endpoint(db: Session = Depends(get_db)) -> Envelope[CustomerListData]:
    return Envelope(data=CustomerListData(customers=list_customers(db)))


@router.get("/inquiries", response_model=Envelope[InquiryListData], summary="List inquiries")
def list_inquiries_endpoint(db: Session = Depends(get_db)) -> Envelope[InquiryListData]:
    inquiries = list_inquiries(db)
    return Envelope(
        data=InquiryListData(
            inquiries=[InquiryResponse.model_validate(inquiry) for inquiry in inquiries]
        )
    )


@router.get("/metrics", response_model=MetricsResponse, summary="Observability metrics")
def metrics_endpoint() -> MetricsResponse:
    snapshot = metrics_store.snapshot()
    return MetricsResponse(counters=snapshot.counters, timings=snapshot.timings)
