"""Health endpoint schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class ServiceStatus(BaseModel):
    status: Literal["healthy", "unhealthy"]
    message: str


class HealthResponse(BaseModel):
    """Overall status is ``degraded`` when any dependency is unhealthy."""

    status: Literal["ok", "degraded"]
    version: str
    services: dict[str, ServiceStatus] = Field(default_factory=dict)
    timestamp: str
