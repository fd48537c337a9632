from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.auth.dependencies import AuthContext
from storefront.errors import ConflictError, InternalError, NotFoundError, ValidationError
from storefront.models.cart_item import CartItem
from storefront.observability import log_event
from storefront.schemas.cart import CartData, CartItemResponse
from storefront.schemas.product import ProductResponse
from storefront.services.customers_service import require_user
from storefront.services.products_service import get_active_product

CART_ITEM_NOT_FOUND = "Cart item not found"


def _commit(db: Session, failure_message: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        raise InternalError(failure_message) from err


def list_cart_items(db: Session, user_id: str) -> list[CartItem]:
    stmt = (
        select(CartItem)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at.asc(), CartItem.id.asc())
    )
    return list(db.scalars(stmt))


def _get_cart_item(db: Session, user_id: str, product_id: str) -> CartItem | None:
    return db.scalar(
        select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
    )


def _ensure_stock(available: int, requested: int) -> None:
    if requested > available:
        raise ValidationError(f"Only {available} item(s) left in stock")


def get_cart(db: Session, auth: AuthContext) -> CartData:
    items: list[CartItemResponse] = []
    total = Decimal("0")
    for item in list_cart_items(db, auth.user_id):
        subtotal = item.product.price * item.quantity
        total += subtotal
        items.append(
            CartItemResponse(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                product=ProductResponse.model_validate(item.product),
                subtotal=subtotal,
            )
        )
    return CartData(cart_items=items, total=total)


def add_to_cart(db: Session, auth: AuthContext, product_id: str, quantity: int) -> CartData:
    require_user(db, auth.user_id)
    product = get_active_product(db, product_id)
    item = _get_cart_item(db, auth.user_id, product_id)

    requested = quantity + (item.quantity if item else 0)
    _ensure_stock(product.stock, requested)

    if item is None:
        db.add(CartItem(user_id=auth.user_id, product_id=product_id, quantity=quantity))
    else:
        item.quantity = requested

    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        # A line that exists now was inserted by a concurrent request.
        if item is None and _get_cart_item(db, auth.user_id, product_id) is not None:
            raise ConflictError("Cart was modified concurrently, retry the request") from err
        raise InternalError("Failed to add item to cart") from err
    except SQLAlchemyError as err:
        db.rollback()
        raise InternalError("Failed to add item to cart") from err
    log_event("cart_item_added", product_id=product_id, user_id=auth.user_id)
    return get_cart(db, auth)


def update_cart_item(db: Session, auth: AuthContext, product_id: str, quantity: int) -> CartData:
    item = _get_cart_item(db, auth.user_id, product_id)
    if item is None:
        raise NotFoundError(CART_ITEM_NOT_FOUND)

    product = get_active_product(db, product_id)
    _ensure_stock(product.stock, quantity)
    item.quantity = quantity
    _commit(db, "Failed to update cart item")
    return get_cart(db, auth)


def remove_cart_item(db: Session, auth: AuthContext, product_id: str) -> CartData:
    item = _get_cart_item(db, auth.user_id, product_id)
    if item is None:
        raise NotFoundError(CART_ITEM_NOT_FOUND)

    db.delete(item)
    _commit(db, "Failed to remove cart item")
    return get_cart(db, auth)


def clear_cart(db: Session, auth: AuthContext) -> None:
    db.execute(delete(CartItem).where(CartItem.user_id == auth.user_id))
    _commit(db, "Failed to clear cart")
