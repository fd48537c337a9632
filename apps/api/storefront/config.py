from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "storefront-jwt-secret"
ALLOWED_APP_MODES = {"development", "production"}
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    app_name: str = "Storefront API"
    app_mode: str = Field(default="development", validation_alias="APP_MODE")

    database_url: str = Field(
        default="sqlite+pysqlite:///./test.db",
        validation_alias="STOREFRONT_DATABASE_URL",
    )
    auto_create_schema: bool = Field(default=True, validation_alias="AUTO_CREATE_SCHEMA")
    cors_allowed_origins: str = "http://127.0.0.1:5500,http://localhost:5500"

    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET, validation_alias="JWT_SECRET")
    allowed_roles: str = "CUSTOMER,ADMIN"
    testing: bool = Field(default=False, validation_alias="STOREFRONT_TESTING")

    dashboard_recent_orders_limit: int = 5
    featured_products_limit: int = 6
    default_page_limit: int = 10
    max_page_limit: int = 100

    mpesa_environment: str = Field(default="sandbox", validation_alias="MPESA_ENVIRONMENT")
    mpesa_consumer_key: str = Field(default="", validation_alias="MPESA_CONSUMER_KEY")
    mpesa_consumer_secret: str = Field(default="", validation_alias="MPESA_CONSUMER_SECRET")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()


def allowed_origins() -> list[str]:
    return [origin.strip() for origin in settings.cors_allowed_origins.split(",") if origin.strip()]


def allowed_roles_list() -> list[str]:
    return [value.strip() for value in settings.allowed_roles.split(",") if value.strip()]


def is_production_mode() -> bool:
    return settings.app_mode.strip().lower() == "production"


def payment_gateway_configured() -> bool:
    """Credentials are only checked for presence, never validated upstream."""
    return bool(settings.mpesa_consumer_key and settings.mpesa_consumer_secret)


def ensure_secure_runtime_settings() -> None:
    """Fail fast when production-like runtime uses insecure defaults."""
    if settings.app_mode.strip().lower() not in ALLOWED_APP_MODES:
        allowed = ", ".join(sorted(ALLOWED_APP_MODES))
        raise RuntimeError(f"APP_MODE must be one of: {allowed}")
    if settings.testing:
        return
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError(
            "JWT_SECRET must be set to a non-default value when STOREFRONT_TESTING is false"
        )
    if len(settings.jwt_secret) < MIN_SECRET_LENGTH:
        raise RuntimeError(
            "JWT_SECRET must be at least "
            f"{MIN_SECRET_LENGTH} characters when STOREFRONT_TESTING is false"
        )
    if is_production_mode() and _is_sqlite_url(settings.database_url):
        raise RuntimeError("STOREFRONT_DATABASE_URL must use postgres in APP_MODE=production")
    if is_production_mode() and settings.auto_create_schema:
        raise RuntimeError("AUTO_CREATE_SCHEMA must be disabled in APP_MODE=production")


def _is_sqlite_url(database_url: str) -> bool:
    value = database_url.strip().lower()
    return value.startswith("sqlite")
