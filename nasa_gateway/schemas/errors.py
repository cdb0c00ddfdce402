from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every failed API response."""

    status: int
    message: str
    timestamp: int
