from dataclasses import dataclass

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.observability import log_event


@dataclass
class StorefrontError(Exception):
    message: str
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __str__(self) -> str:
        return self.message


class NotFoundError(StorefrontError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message=message, status_code=status.HTTP_404_NOT_FOUND)


class ValidationError(StorefrontError):
    def __init__(self, message: str = "Invalid request") -> None:
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST)


class ConflictError(StorefrontError):
    def __init__(self, message: str = "Conflicting request") -> None:
        super().__init__(message=message, status_code=status.HTTP_409_CONFLICT)


class InternalError(StorefrontError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_body(message: str, **extra) -> dict:
    return {"status": "error", "message": message, **extra}


async def _storefront_error_handler(_request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        log_event(f"request_failed:{type(exc).__name__}:{exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def _http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(error_body("Validation failed", errors=errors)),
    )


async def _database_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log_event(f"database_error:{type(exc).__name__}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, _storefront_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
