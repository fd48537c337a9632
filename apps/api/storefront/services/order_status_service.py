"""Order status transitions and the tracking entries they produce.

A status change and its tracking entry are written in the same transaction:
observers see both or neither.
"""

from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.db.base import as_utc, utcnow
from storefront.errors import InternalError, NotFoundError
from storefront.models.order import Order, OrderStatus
from storefront.models.order_tracking import OrderTrackingEntry
from storefront.observability import log_event, record_status_transition

STATUS_DESCRIPTIONS: dict[str, str] = {
    OrderStatus.CONFIRMED.value: "Your order has been confirmed and is being prepared",
    OrderStatus.SHIPPED.value: "Your order has been shipped and is on its way",
    OrderStatus.DELIVERED.value: "Your order has been delivered successfully",
    OrderStatus.CANCELLED.value: "Your order has been cancelled",
}

ORDER_PLACED_DESCRIPTION = "Your order has been placed and is being processed"


def describe_status(status_value: str) -> str:
    return STATUS_DESCRIPTIONS.get(status_value, f"Order status updated to {status_value}")


def _next_updated_at(order: Order):
    now = utcnow()
    if order.updated_at is not None and now <= as_utc(order.updated_at):
        return as_utc(order.updated_at) + timedelta(microseconds=1)
    return now


def _next_entry_time(db: Session, order_id: str):
    # Never earlier than the latest entry; equal timestamps fall back to id order.
    now = utcnow()
    latest = db.scalar(
        select(func.max(OrderTrackingEntry.created_at)).where(
            OrderTrackingEntry.order_id == order_id
        )
    )
    if latest is not None and now < as_utc(latest):
        return as_utc(latest)
    return now


def append_tracking_entry(
    db: Session,
    *,
    order_id: str,
    status_value: str,
    description: str,
) -> OrderTrackingEntry:
    """Stage an entry on the session; the caller owns the commit."""
    entry = OrderTrackingEntry(
        order_id=order_id,
        status=status_value,
        description=description,
        created_at=_next_entry_time(db, order_id),
    )
    db.add(entry)
    return entry


def update_order_status(db: Session, order_id: str, status_value: str) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")

    previous_status = order.status
    order.status = status_value
    order.updated_at = _next_updated_at(order)
    append_tracking_entry(
        db,
        order_id=order.id,
        status_value=status_value,
        description=describe_status(status_value),
    )

    try:
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        log_event("order_status_update_failed", order_id=order_id)
        raise InternalError("Failed to update order status") from err

    db.refresh(order)
    record_status_transition(status_value)
    log_event(
        f"order_status_updated:{previous_status}->{status_value}",
        order_id=order.id,
        order_status=status_value,
    )
    return order
