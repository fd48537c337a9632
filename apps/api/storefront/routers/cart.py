from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.auth.dependencies import AuthContext, get_auth_context
from storefront.db.session import get_db
from storefront.schemas.cart import CartData, CartItemAdd, CartItemUpdate
from storefront.schemas.common import Envelope, MessageEnvelope
from storefront.services.cart_service import (
    add_to_cart,
    clear_cart,
    get_cart,
    remove_cart_item,
    update_cart_item,
)

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=Envelope[CartData], summary="Current cart")
def get_cart_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[CartData]:
    return Envelope(data=get_cart(db, auth))


@router.post("", response_model=Envelope[CartData], summary="Add item to cart")
def add_to_cart_endpoint(
    payload: CartItemAdd,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[CartData]:
    cart = add_to_cart(db, auth, payload.product_id, payload.quantity)
    return Envelope(message="Item added to cart", data=cart)


@router.patch("/{product_id}", response_model=Envelope[CartData], summary="Change quantity")
def update_cart_item_endpoint(
    product_id: str,
    payload: CartItemUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[CartData]:
    return Envelope(
        message="Cart updated", data=update_cart_item(db, auth, product_id, payload.quantity)
    )


@router.delete("/{product_id}", response_model=Envelope[CartData], summary="Remove cart item")
def remove_cart_item_endpoint(
    product_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[CartData]:
    return Envelope(message="Item removed from cart", data=remove_cart_item(db, auth, product_id))


@router.delete("", response_model=MessageEnvelope, summary="Clear cart")
def clear_cart_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> MessageEnvelope:
    clear_cart(db, auth)
    return MessageEnvelope(message="Cart cleared")
