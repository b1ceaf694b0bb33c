"""Shared API response models."""

from pydantic import BaseModel, ConfigDict, Field

from safari_shared.models import ErrorCode, ErrorResponse

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "PingResponse",
]


class PingResponse(BaseModel):
    """Health check response."""

    model_config = ConfigDict(strict=True)

    status: str = Field(default="ok", examples=["ok"])
    timestamp: str = Field(..., description="Server time, ISO 8601 UTC")
    service: str = Field(default="safari-booking-api")
