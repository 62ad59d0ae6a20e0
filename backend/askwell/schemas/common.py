"""
Askwell Backend — Shared Pydantic Schemas
=========================================

What:  Base configuration and the response envelopes shared by every router.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Base schema: builds from ORM attributes, strips surrounding whitespace."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement for endpoints that return no resource."""
    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "question with ID '42' was not found",
            "details": {"resource": "question", "resource_id": "42"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
