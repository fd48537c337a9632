from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect, text

from storefront.config import settings
from storefront.db.migration_check import (
    SchemaOutOfDateError,
    assert_db_is_up_to_date,
    get_alembic_head_revision,
    get_current_db_revision,
    maybe_create_schema,
)


@pytest.fixture
def sqlite_engine(tmp_path: Path):
    db_path = tmp_path / "migration-check.db"
    engine = create_engine(f"sqlite+pysqlite:///{db_path}")
    try:
        yield engine
    finally:
        engine.dispose()


def test_alembic_head_is_the_initial_storefront_revision():
    assert get_alembic_head_revision() == "20261018_0001"


def test_assert_db_is_up_to_date_fails_when_alembic_version_missing(sqlite_engine):
    assert get_current_db_revision(sqlite_engine) is None

    with pytest.raises(SchemaOutOfDateError, match="Database schema not up to date") as exc_info:
        assert_db_is_up_to_date(sqlite_engine)

    assert exc_info.value.current is None
    assert exc_info.value.head == "20261018_0001"


def test_assert_db_is_up_to_date_passes_at_head(sqlite_engine):
    head = get_alembic_head_revision()
    with sqlite_engine.begin() as connection:
        connection.execute(text("CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL)"))
        connection.execute(
            text("INSERT INTO alembic_version (version_num) VALUES (:rev)"), {"rev": head}
        )

    assert get_current_db_revision(sqlite_engine) == head
    assert_db_is_up_to_date(sqlite_engine)


def test_maybe_create_schema_creates_tables_when_enabled(sqlite_engine, monkeypatch):
    monkeypatch.setattr(settings, "auto_create_schema", True)
    monkeypatch.setattr(settings, "app_mode", "development")

    maybe_create_schema(sqlite_engine)

    tables = set(inspect(sqlite_engine).get_table_names())
    assert {"orders", "order_tracking", "products", "cart_items"} <= tables


def test_maybe_create_schema_skips_when_disabled(sqlite_engine, monkeypatch):
    monkeypatch.setattr(settings, "auto_create_schema", False)

    maybe_create_schema(sqlite_engine)

    assert inspect(sqlite_engine).get_table_names() == []


def test_maybe_create_schema_refuses_production(sqlite_engine, monkeypatch):
    monkeypatch.setattr(settings, "auto_create_schema", True)
    monkeypatch.setattr(settings, "app_mode", "production")

    with pytest.raises(RuntimeError, match="AUTO_CREATE_SCHEMA"):
        maybe_create_schema(sqlite_engine)
