from decimal import Decimal
from typing import Any

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from storefront.auth.dependencies import AuthContext
from storefront.errors import InternalError, NotFoundError, ValidationError
from storefront.models.cart_item import CartItem
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.observability import log_event, observe_timing, record_order_placed
from storefront.schemas.order import CheckoutRequest
from storefront.services.cart_service import list_cart_items
from storefront.services.customers_service import require_user
from storefront.services.ids import new_order_id
from storefront.services.order_status_service import (
    ORDER_PLACED_DESCRIPTION,
    append_tracking_entry,
)

ORDER_NOT_FOUND = "Order not found"


def list_orders(
    db: Session,
    *,
    page: int,
    limit: int,
    status_filter: str | None = None,
    search: str | None = None,
) -> tuple[list[Order], int]:
    stmt = select(Order)
    filters: list[Any] = []
    if status_filter:
        filters.append(Order.status == status_filter)
    if search:
        needle = f"%{search.lower()}%"
        filters.append(
            or_(
                func.lower(Order.id).like(needle),
                func.lower(Order.customer_name).like(needle),
                func.lower(func.coalesce(Order.customer_email, "")).like(needle),
            )
        )
    if filters:
        stmt = stmt.where(and_(*filters))

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.options(selectinload(Order.items))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(rows), int(total)


def list_user_orders(db: Session, auth: AuthContext) -> list[Order]:
    stmt = (
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.user_id == auth.user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return list(db.scalars(stmt))


def get_user_order(db: Session, auth: AuthContext, order_id: str) -> Order:
    order = db.scalar(
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.id == order_id, Order.user_id == auth.user_id)
    )
    if order is None:
        raise NotFoundError(ORDER_NOT_FOUND)
    return order


def checkout(db: Session, auth: AuthContext, payload: CheckoutRequest) -> Order:
    """Turn the caller's cart into an order in a single transaction."""
    require_user(db, auth.user_id)
    cart_items = list_cart_items(db, auth.user_id)
    if not cart_items:
        raise ValidationError("Cart is empty")

    order = Order(
        id=new_order_id(),
        user_id=auth.user_id,
        customer_name=payload.customer_name,
        customer_email=str(payload.customer_email),
        customer_phone=payload.customer_phone,
        shipping_address=payload.shipping_address,
        status=OrderStatus.PROCESSING.value,
        total_amount=Decimal("0"),
    )

    for cart_item in cart_items:
        product = cart_item.product
        if not product.is_active:
            raise ValidationError(f"{product.name} is no longer available")
        if cart_item.quantity > product.stock:
            raise ValidationError(f"Only {product.stock} {product.name} left in stock")

    total = Decimal("0")
    for cart_item in cart_items:
        product = cart_item.product
        line_total = product.price * cart_item.quantity
        total += line_total
        order.items.append(
            OrderItem(
                product_id=product.id,
                product_name=product.name,
                product_price=product.price,
                quantity=cart_item.quantity,
                total_price=line_total,
            )
        )
        product.stock -= cart_item.quantity

    order.total_amount = total
    db.add(order)
    db.flush()
    append_tracking_entry(
        db,
        order_id=order.id,
        status_value=OrderStatus.PROCESSING.value,
        description=ORDER_PLACED_DESCRIPTION,
    )
    db.execute(delete(CartItem).where(CartItem.user_id == auth.user_id))

    with observe_timing("checkout_commit_seconds"):
        try:
            db.commit()
        except SQLAlchemyError as err:
            db.rollback()
            log_event("checkout_failed", user_id=auth.user_id)
            raise InternalError("Failed to place order") from err

    db.refresh(order)
    record_order_placed()
    log_event("order_placed", order_id=order.id, user_id=auth.user_id)
    return order
