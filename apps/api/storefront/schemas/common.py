from decimal import Decimal
from typing import Annotated, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer

# Stored as NUMERIC, emitted as a JSON number.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

T = TypeVar("T")


class ResponseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Envelope(BaseModel, Generic[T]):
    status: Literal["success"] = "success"
    message: str | None = None
    data: T | None = None


class MessageEnvelope(BaseModel):
    status: Literal["success"] = "success"
    message: str


class PaginationMeta(ResponseModel):
    page: int
    limit: int
    total: int
