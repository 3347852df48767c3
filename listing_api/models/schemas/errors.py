"""Error response schemas for OpenAPI documentation."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized API error response body."""

    code: str = Field(
        ...,
        description="Error code for client-side handling",
        examples=["VALIDATION_ERROR"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Range filter 'price' needs a 'from' or 'to' bound"],
    )
    error_id: Optional[str] = Field(
        None,
        description="Unique error ID for support tracking",
        examples=["a1b2c3d4"],
    )
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional error context",
    )
    path: Optional[str] = Field(
        None,
        description="Request path that caused the error",
        examples=["/api/v1/tasks"],
    )


class APIErrorResponse(BaseModel):
    """Wrapper for error responses (matches actual API error format)."""

    error: ErrorResponse = Field(..., description="Error details")


# Shared `responses=` mapping for listing routes
LISTING_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": APIErrorResponse, "description": "Malformed filter value"},
    401: {"model": APIErrorResponse, "description": "Missing, expired or invalid token"},
    403: {"model": APIErrorResponse, "description": "Caller may not list these rows"},
    404: {"model": APIErrorResponse, "description": "Unknown listing"},
    503: {"model": APIErrorResponse, "description": "Backing store unavailable"},
}
