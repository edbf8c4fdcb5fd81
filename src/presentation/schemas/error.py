"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Error body shared by every failing endpoint."""

    error: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["CREDIT_LIMIT_EXCEEDED"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Purchase of 900.00 exceeds available credit 800.00"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )
