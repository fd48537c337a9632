from collections.abc import Callable
from typing import Literal

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import payment_gateway_configured, settings
from storefront.db.base import utcnow
from storefront.db.migration_check import assert_db_is_up_to_date
from storefront.db.session import SessionLocal, engine
from storefront.observability import log_event, metrics_store
from storefront.schemas.health import (
    HealthResponse,
    MpesaStatus,
    ReadinessDependency,
    ReadinessResponse,
)

ReadinessStatus = Literal["ok", "error"]

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", summary="Health check", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        message=f"{settings.app_name} is running",
        timestamp=utcnow(),
        mpesa=MpesaStatus(
            environment=settings.mpesa_environment,
            configured=payment_gateway_configured(),
        ),
    )


@router.get(
    "/ready",
    summary="Readiness check",
    response_model=ReadinessResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ReadinessResponse}},
)
def readiness(response: Response) -> ReadinessResponse:
    database_status = _safe_dependency_status(
        "database", lambda: database_dependency_status(SessionLocal)
    )
    dependencies = [ReadinessDependency(name="database", status=database_status)]

    # Auto-created schemas carry no alembic revision to compare.
    if not settings.auto_create_schema:
        migrations_status = _safe_dependency_status(
            "migrations", lambda: migration_dependency_status(engine)
        )
        dependencies.append(ReadinessDependency(name="migrations", status=migrations_status))

    readiness_status = "ok" if all(dep.status == "ok" for dep in dependencies) else "degraded"
    if readiness_status != "ok":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status=readiness_status, dependencies=dependencies)


def _safe_dependency_status(
    dependency_name: str,
    checker: Callable[[], ReadinessStatus],
) -> ReadinessStatus:
    metrics_store.increment("readiness_dependency_checked_total")
    try:
        result = checker()
    except Exception as exc:  # readiness reports degraded instead of raising
        log_event(f"readiness_dependency_check_failed:{dependency_name}:{type(exc).__name__}")
        result = "error"
    if result != "ok":
        metrics_store.increment("readiness_dependency_error_total")
    return result


def database_dependency_status(
    session_factory: Callable[[], Session],
) -> ReadinessStatus:
    try:
        with session_factory() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return "error"
    return "ok"


def migration_dependency_status(db_engine: Engine) -> ReadinessStatus:
    assert_db_is_up_to_date(db_engine)
    return "ok"
