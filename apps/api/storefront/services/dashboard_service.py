"""Admin dashboard snapshot built from independent concurrent reads.

Each read runs on its own session. The snapshot is all-or-nothing: if any read
fails the whole aggregation fails and no partial stats are returned.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.db.session import SessionFactory
from storefront.errors import InternalError
from storefront.models.order import Order, OrderStatus
from storefront.models.product import Product
from storefront.observability import log_event, observe_timing, record_dashboard_failure
from storefront.schemas.dashboard import DashboardData, DashboardStats, RecentOrder

DashboardQuery = Callable[[Session], Any]


def count_active_products(db: Session) -> int:
    return db.scalar(select(func.count(Product.id)).where(Product.is_active.is_(True))) or 0


def count_orders(db: Session) -> int:
    return db.scalar(select(func.count(Order.id))) or 0


def revenue_amounts(db: Session) -> list[Decimal]:
    stmt = select(Order.total_amount).where(Order.status != OrderStatus.CANCELLED.value)
    return list(db.scalars(stmt))


def count_pending_orders(db: Session) -> int:
    stmt = select(func.count(Order.id)).where(Order.status == OrderStatus.PROCESSING.value)
    return db.scalar(stmt) or 0


def recent_orders(db: Session) -> list[RecentOrder]:
    stmt = (
        select(Order)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(settings.dashboard_recent_orders_limit)
    )
    return [RecentOrder.model_validate(order) for order in db.scalars(stmt)]


def sum_revenue(amounts: list[Decimal]) -> Decimal:
    return sum((amount or Decimal("0") for amount in amounts), Decimal("0"))


def _run_read(session_factory: SessionFactory, query: DashboardQuery) -> Any:
    with session_factory() as db:
        return query(db)


def _run_concurrently(
    session_factory: SessionFactory, queries: dict[str, DashboardQuery]
) -> dict[str, Any]:
    # Leaving the executor block waits for every read, failed or not.
    with ThreadPoolExecutor(max_workers=len(queries)) as pool:
        futures = {
            name: pool.submit(_run_read, session_factory, query) for name, query in queries.items()
        }
        return {name: future.result() for name, future in futures.items()}


def get_dashboard_stats(session_factory: SessionFactory) -> DashboardData:
    queries: dict[str, DashboardQuery] = {
        "products": count_active_products,
        "orders": count_orders,
        "revenue": revenue_amounts,
        "pending": count_pending_orders,
        "recent": recent_orders,
    }

    with observe_timing("dashboard_aggregation_seconds"):
        try:
            results = _run_concurrently(session_factory, queries)
        except Exception as err:
            record_dashboard_failure()
            log_event(f"dashboard_aggregation_failed:{type(err).__name__}", level=logging.ERROR)
            raise InternalError("Failed to load dashboard statistics") from err

    return DashboardData(
        stats=DashboardStats(
            total_products=results["products"],
            total_orders=results["orders"],
            total_revenue=sum_revenue(results["revenue"]),
            pending_orders=results["pending"],
        ),
        recent_orders=results["recent"],
    )
