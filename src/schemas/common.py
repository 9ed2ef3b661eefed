"""Shared response schemas."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Acknowledgement returned by update and delete endpoints."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    message: str
    stack: str | None = None
