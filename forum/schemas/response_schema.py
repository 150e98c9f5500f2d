"""Unified API response schemas."""

from typing import Literal

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Base of every successful response body."""

    success: Literal[True] = True


class ErrorResponse(BaseModel):
    """Error body: a human-readable message, never internal detail."""

    success: Literal[False] = False
    error: str


class MessageResponse(SuccessResponse):
    """Success response carrying only a message."""

    message: str


def success_response(**data: object) -> dict:
    """Build a success response dict for returning from endpoints."""
    return {"success": True, **data}
