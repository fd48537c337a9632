from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.auth.dependencies import AuthContext, get_auth_context, require_admin
from storefront.db.session import get_db
from storefront.schemas.common import Envelope
from storefront.schemas.tracking import (
    TrackingData,
    TrackingEntryCreate,
    TrackingEntryData,
    TrackingEntryResponse,
)
from storefront.services.tracking_service import (
    add_tracking_update,
    get_order_tracking,
    get_user_order_tracking,
)

router = APIRouter(prefix="/api/tracking", tags=["tracking"])


@router.get(
    "/user/{order_id}",
    response_model=Envelope[TrackingData],
    summary="Tracking for one of the caller's orders",
)
def user_tracking_endpoint(
    order_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[TrackingData]:
    return Envelope(data=get_user_order_tracking(db, auth, order_id))


@router.get("/{order_id}", response_model=Envelope[TrackingData], summary="Order tracking")
def tracking_endpoint(
    order_id: str,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> Envelope[TrackingData]:
    return Envelope(data=get_order_tracking(db, order_id))


@router.post(
    "/{order_id}",
    response_model=Envelope[TrackingEntryData],
    status_code=201,
    summary="Append a manual tracking entry",
)
def add_tracking_endpoint(
    order_id: str,
    payload: TrackingEntryCreate,
    db: Session = Depends(get_db),
    _auth: AuthContext = Depends(require_admin),
) -> Envelope[TrackingEntryData]:
    entry = add_tracking_update(db, order_id, payload.status, payload.description)
    return Envelope(
        message="Tracking update added successfully",
        data=TrackingEntryData(tracking=TrackingEntryResponse.model_validate(entry)),
    )
