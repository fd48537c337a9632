from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.db.session import get_db
from storefront.schemas.common import Envelope, PaginationMeta
from storefront.schemas.product import (
    CategoryListData,
    ProductData,
    ProductListData,
    ProductResponse,
)
from storefront.services.products_service import (
    get_active_product,
    list_categories,
    list_featured_products,
    list_products,
)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=Envelope[ProductListData], summary="Browse active products")
def list_products_endpoint(
    db: Session = Depends(get_db),
    category: str | None = Query(default=None),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.max_page_limit),
) -> Envelope[ProductListData]:
    products, total = list_products(db, page=page, limit=limit, category=category, search=search)
    return Envelope(
        data=ProductListData(
            products=[ProductResponse.model_validate(product) for product in products],
            pagination=PaginationMeta(page=page, limit=limit, total=total),
        )
    )


@router.get("/featured", response_model=Envelope[ProductListData], summary="Featured products")
def featured_products_endpoint(db: Session = Depends(get_db)) -> Envelope[ProductListData]:
    products = list_featured_products(db)
    return Envelope(
        data=ProductListData(
            products=[ProductResponse.model_validate(product) for product in products]
        )
    )


@router.get("/categories", response_model=Envelope[CategoryListData], summary="Categories")
def categories_endpoint(db: Session = Depends(get_db)) -> Envelope[CategoryListData]:
    return Envelope(data=CategoryListData(categories=list_categories(db)))


@router.get("/{product_id}", response_model=Envelope[ProductData], summary="Product detail")
def get_product_endpoint(product_id: str, db: Session = Depends(get_db)) -> Envelope[ProductData]:
    product = get_active_product(db, product_id)
    return Envelope(data=ProductData(product=ProductResponse.model_validate(product)))
