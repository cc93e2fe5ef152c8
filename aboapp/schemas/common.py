"""
AboApp Backend — Shared Response Schemas
==========================================

Error and health payloads used across all routers.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Active subscriptions need a next renewal date",
            "details": {"field": "next_renewal_date"},
            "request_id": "3f9a1c2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str
    database: str = Field(description="Database connectivity: connected, disconnected")
    auth_provider: str = Field(description="configured or missing")
    email_provider: str = Field(description="configured or missing")
    uptime_seconds: float
