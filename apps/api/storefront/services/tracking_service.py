from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.auth.dependencies import AuthContext
from storefront.errors import InternalError, NotFoundError
from storefront.models.order import Order
from storefront.models.order_tracking import OrderTrackingEntry
from storefront.observability import log_event
from storefront.schemas.tracking import (
    TrackingData,
    TrackingEntryResponse,
    TrackingOrderSummary,
)
from storefront.services.order_status_service import append_tracking_entry

ORDER_NOT_FOUND = "Order not found"


def list_tracking_history(db: Session, order_id: str) -> list[OrderTrackingEntry]:
    stmt = (
        select(OrderTrackingEntry)
        .where(OrderTrackingEntry.order_id == order_id)
        .order_by(OrderTrackingEntry.created_at.asc(), OrderTrackingEntry.id.asc())
    )
    return list(db.scalars(stmt))


def _tracking_payload(db: Session, order: Order) -> TrackingData:
    return TrackingData(
        order=TrackingOrderSummary.model_validate(order),
        tracking_history=[
            TrackingEntryResponse.model_validate(entry)
            for entry in list_tracking_history(db, order.id)
        ],
    )


def get_order_tracking(db: Session, order_id: str) -> TrackingData:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError(ORDER_NOT_FOUND)
    return _tracking_payload(db, order)


def get_user_order_tracking(db: Session, auth: AuthContext, order_id: str) -> TrackingData:
    # Orders owned by someone else are indistinguishable from missing ones.
    order = db.scalar(select(Order).where(Order.id == order_id, Order.user_id == auth.user_id))
    if order is None:
        raise NotFoundError(ORDER_NOT_FOUND)
    return _tracking_payload(db, order)


def add_tracking_update(
    db: Session,
    order_id: str,
    status_value: str,
    description: str,
) -> OrderTrackingEntry:
    """Raw append: no status lookup and the order's own status is left alone."""
    exists = db.scalar(select(Order.id).where(Order.id == order_id))
    if exists is None:
        raise NotFoundError(ORDER_NOT_FOUND)

    entry = append_tracking_entry(
        db, order_id=order_id, status_value=status_value, description=description
    )
    try:
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        raise InternalError("Failed to add tracking update") from err

    db.refresh(entry)
    log_event(f"tracking_update_added:{status_value}", order_id=order_id)
    return entry
