"""
AdoptMe Backend - Response Envelopes
=====================================

What:  The JSON envelopes every endpoint answers with.
How:   Success responses carry either a `payload`, a `message`, or both;
       every error (raised anywhere) is rendered by the global handlers as
       ErrorResponse.

    {"status": "success", "payload": ...}
    {"status": "success", "message": "Pet adopted"}
    {"status": "error", "error": "Pet not found"}
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

PayloadT = TypeVar("PayloadT")


class PayloadResponse(BaseModel, Generic[PayloadT]):
    status: Literal["success"] = "success"
    payload: PayloadT


class MessageResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str


class MessagePayloadResponse(PayloadResponse[PayloadT], Generic[PayloadT]):
    message: str


class ErrorResponse(BaseModel):
    """Standardized error body for all API errors."""

    status: Literal["error"] = "error"
    error: str = Field(description="Human-readable error message (stable literal)")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
