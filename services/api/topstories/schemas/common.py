"""Common schemas used across the API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": str }
    """

    error: str


class UpdateResponse(BaseModel):
    """Response payload for GET /update."""

    ok: bool = True
