import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from storefront.config import allowed_origins, ensure_secure_runtime_settings, settings
from storefront.db.migration_check import maybe_create_schema
from storefront.db.session import engine
from storefront.errors import register_exception_handlers
from storefront.observability import configure_logging, log_event, metrics_store, set_request_id
from storefront.routers.admin import router as admin_router
from storefront.routers.cart import router as cart_router
from storefront.routers.health import router as health_router
from storefront.routers.inquiries import router as inquiries_router
from storefront.routers.orders import router as orders_router
from storefront.routers.products import router as products_router
from storefront.routers.tracking import router as tracking_router


@asynccontextmanager
async def lifespan(_app: FastAPI):
    import storefront.models  # noqa: F401 (register all SQLAlchemy models)

    ensure_secure_runtime_settings()
    if not settings.testing:
        configure_logging()
    maybe_create_schema(engine)
    yield


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Storefront and admin console API",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    set_request_id(request_id)

    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start

    response.headers["X-Request-ID"] = request_id
    metrics_store.increment("http_requests_total")
    metrics_store.observe("http_request_duration_seconds", elapsed)
    log_event(
        f"http_request:{request.method}:{request.url.path}:{response.status_code}",
        order_id=request.path_params.get("order_id"),
        product_id=request.path_params.get("product_id"),
    )
    return response


app.include_router(health_router)
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(tracking_router)
app.include_router(inquiries_router)
app.include_router(admin_router)
