import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import storefront.models  # noqa: F401
from storefront.auth.jwt import issue_jwt
from storefront.config import settings
from storefront.db.base import Base
from storefront.db.session import engine as app_engine
from storefront.db.session import get_db
from storefront.main import app
from storefront.models.order import Order, OrderStatus
from storefront.models.product import Product
from storefront.models.user import User, UserRole
from storefront.observability import metrics_store

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def enable_testing_mode():
    original = settings.testing
    settings.testing = True
    yield
    settings.testing = original


@pytest.fixture(scope="session", autouse=True)
def setup_test_schema():
    Base.metadata.drop_all(bind=app_engine)
    Base.metadata.create_all(bind=app_engine)
    yield
    Base.metadata.drop_all(bind=app_engine)


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=app_engine)
    Base.metadata.create_all(bind=app_engine)
    yield


@pytest.fixture(autouse=True)
def reset_metrics_store():
    metrics_store.reset()
    yield


@pytest.fixture
def session_factory():
    return sessionmaker(autocommit=False, autoflush=False, bind=app_engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(db_session, session_factory):
    db_session_lock = threading.Lock()

    def override_get_db():
        if db_session_lock.acquire(blocking=False):
            try:
                yield db_session
            finally:
                db_session_lock.release()
            return

        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(role: str, sub: str) -> dict[str, str]:
        token = issue_jwt({"sub": sub, "role": role}, settings.jwt_secret)
        return {"Authorization": f"Bearer {token}"}

    return {
        "admin": _headers("ADMIN", "admin-1"),
        "customer_a": _headers("CUSTOMER", "cust-a"),
        "customer_b": _headers("CUSTOMER", "cust-b"),
    }


@pytest.fixture
def make_user(db_session):
    def _make(user_id: str, role: str = UserRole.CUSTOMER.value, **overrides) -> User:
        user = User(
            id=user_id,
            name=overrides.pop("name", f"User {user_id}"),
            email=overrides.pop("email", f"{user_id}@example.com"),
            phone=overrides.pop("phone", "+254700000000"),
            role=role,
            **overrides,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_product(db_session):
    counter = {"value": 0}

    def _make(**overrides) -> Product:
        counter["value"] += 1
        n = counter["value"]
        product = Product(
            id=overrides.pop("id", f"PRD-TEST{n:04d}"),
            name=overrides.pop("name", f"Product {n}"),
            description=overrides.pop("description", "A product"),
            price=Decimal(str(overrides.pop("price", "10.00"))),
            category=overrides.pop("category", "general"),
            stock=overrides.pop("stock", 10),
            is_active=overrides.pop("is_active", True),
            created_at=overrides.pop("created_at", BASE_TIME + timedelta(minutes=n)),
            **overrides,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def make_order(db_session):
    counter = {"value": 0}

    def _make(**overrides) -> Order:
        counter["value"] += 1
        n = counter["value"]
        created_at = overrides.pop("created_at", BASE_TIME + timedelta(hours=n))
        order = Order(
            id=overrides.pop("id", f"ORD-TEST{n:04d}"),
            user_id=overrides.pop("user_id", None),
            customer_name=overrides.pop("customer_name", f"Customer {n}"),
            customer_email=overrides.pop("customer_email", f"customer{n}@example.com"),
            customer_phone=overrides.pop("customer_phone", "+254711111111"),
            status=overrides.pop("status", OrderStatus.PROCESSING.value),
            total_amount=Decimal(str(overrides.pop("total_amount", "100.00"))),
            created_at=created_at,
            updated_at=overrides.pop("updated_at", created_at),
            **overrides,
        )
        db_session.add(order)
        db_session.commit()
        return order

    return _make
