"""Health check response models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class HealthCheckResponse(BaseModel):
    """Process liveness plus which document store backs the users routes."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "ok",
                "version": "0.1.0",
                "environment": "development",
                "store_backend": "cosmos",
                "store_configured": True,
            }
        }
    )

    status: Literal["ok", "degraded"]
    version: str
    environment: str | None = None
    store_backend: str = Field(..., description="Selected document store backend")
    store_configured: bool = Field(..., description="Whether the backend has what it needs to connect")
