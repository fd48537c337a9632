from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class MpesaStatus(BaseModel):
    environment: str
    configured: bool


class HealthResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
    timestamp: datetime
    mpesa: MpesaStatus


class ReadinessDependency(BaseModel):
    name: str
    status: Literal["ok", "error"]


class ReadinessResponse(BaseModel):
    status: Literal["ok", "degraded"]
    dependencies: list[ReadinessDependency]
