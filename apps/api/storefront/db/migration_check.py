from __future__ import annotations

from pathlib import Path
from typing import Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from storefront.config import is_production_mode, settings
from storefront.db.base import Base

_ALEMBIC_VERSION_TABLE = "alembic_version"
_ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"


class SchemaOutOfDateError(RuntimeError):
    def __init__(self, current: Optional[str], head: str) -> None:
        super().__init__(
            f"Database schema not up to date (at {current or 'no revision'}, head is {head}). "
            "Run: alembic upgrade head"
        )
        self.current = current
        self.head = head


def get_alembic_head_revision() -> str:
    script = ScriptDirectory.from_config(Config(str(_ALEMBIC_INI)))
    return script.get_current_head()


def get_current_db_revision(engine: Engine) -> Optional[str]:
    if not inspect(engine).has_table(_ALEMBIC_VERSION_TABLE):
        return None

    with engine.connect() as connection:
        return connection.execute(
            text(f"SELECT version_num FROM {_ALEMBIC_VERSION_TABLE} LIMIT 1")
        ).scalar_one_or_none()


def assert_db_is_up_to_date(engine: Engine) -> None:
    """Used by readiness when the schema is managed by alembic instead of create_all."""
    current = get_current_db_revision(engine)
    head = get_alembic_head_revision()
    if current != head:
        raise SchemaOutOfDateError(current, head)


def maybe_create_schema(engine: Engine) -> None:
    if not settings.auto_create_schema:
        return
    if is_production_mode():
        raise RuntimeError("AUTO_CREATE_SCHEMA must be disabled in APP_MODE=production")

    Base.metadata.create_all(bind=engine)
