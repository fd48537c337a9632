from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.auth.dependencies import AuthContext, get_auth_context
from storefront.db.session import get_db
from storefront.schemas.common import Envelope
from storefront.schemas.order import CheckoutRequest, OrderData, OrderListData, OrderResponse
from storefront.services.orders_service import checkout, get_user_order, list_user_orders

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=Envelope[OrderData], status_code=201, summary="Place order")
def checkout_endpoint(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[OrderData]:
    order = checkout(db, auth, payload)
    return Envelope(
        message="Order placed successfully",
        data=OrderData(order=OrderResponse.model_validate(order)),
    )


@router.get("", response_model=Envelope[OrderListData], summary="My orders")
def list_my_orders_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[OrderListData]:
    orders = list_user_orders(db, auth)
    return Envelope(
        data=OrderListData(orders=[OrderResponse.model_validate(order) for order in orders])
    )


@router.get("/{order_id}", response_model=Envelope[OrderData], summary="My order detail")
def get_my_order_endpoint(
    order_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[OrderData]:
    order = get_user_order(db, auth, order_id)
    return Envelope(data=OrderData(order=OrderResponse.model_validate(order)))
