from typing import Any

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.errors import InternalError, NotFoundError, ValidationError
from storefront.models.product import Product
from storefront.observability import log_event, record_product_deactivated
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.services.ids import new_product_id

PRODUCT_NOT_FOUND = "Product not found"
NON_NULLABLE_FIELDS = ("name", "price", "stock")


def _commit(db: Session, failure_message: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        raise InternalError(failure_message) from err


def list_products(
    db: Session,
    *,
    page: int,
    limit: int,
    category: str | None = None,
    search: str | None = None,
) -> tuple[list[Product], int]:
    filters: list[Any] = [Product.is_active.is_(True)]
    if category:
        filters.append(Product.category == category)
    if search:
        needle = f"%{search.lower()}%"
        filters.append(
            or_(
                func.lower(Product.name).like(needle),
                func.lower(func.coalesce(Product.description, "")).like(needle),
            )
        )

    stmt = select(Product).where(and_(*filters))
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.order_by(Product.created_at.desc(), Product.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(rows), int(total)


def list_featured_products(db: Session) -> list[Product]:
    stmt = (
        select(Product)
        .where(Product.is_active.is_(True))
        .order_by(Product.created_at.desc(), Product.id.asc())
        .limit(settings.featured_products_limit)
    )
    return list(db.scalars(stmt))


def list_categories(db: Session) -> list[str]:
    stmt = (
        select(Product.category)
        .where(Product.is_active.is_(True), Product.category.is_not(None))
        .distinct()
        .order_by(Product.category.asc())
    )
    return [category for category in db.scalars(stmt) if category]


def get_active_product(db: Session, product_id: str) -> Product:
    product = db.scalar(
        select(Product).where(Product.id == product_id, Product.is_active.is_(True))
    )
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return product


def create_product(db: Session, payload: ProductCreate) -> Product:
    product = Product(id=new_product_id(), is_active=True, **payload.model_dump())
    db.add(product)
    _commit(db, "Failed to create product")
    db.refresh(product)
    log_event("product_created", product_id=product.id)
    return product


def update_product(db: Session, product_id: str, payload: ProductUpdate) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)

    changes = payload.model_dump(exclude_unset=True)
    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be null")
    for field, value in changes.items():
        setattr(product, field, value)

    _commit(db, "Failed to update product")
    db.refresh(product)
    log_event("product_updated", product_id=product.id)
    return product


def deactivate_product(db: Session, product_id: str) -> None:
    """Soft delete. Only active rows match, so repeating it raises NotFound."""
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.is_active.is_(True))
        .values(is_active=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(PRODUCT_NOT_FOUND)

    _commit(db, "Failed to delete product")
    record_product_deactivated()
    log_event("product_deactivated", product_id=product_id)
