"""Schemas subpackage — Pydantic request/response models."""

from app.schemas.iris import (
    SEARCH_ERROR_MESSAGE,
    ErrorResponse,
    IrisSearchRequest,
    IrisSearchResponse,
    IrisZone,
)

__all__ = [
    "SEARCH_ERROR_MESSAGE",
    "ErrorResponse",
    "IrisSearchRequest",
    "IrisSearchResponse",
    "IrisZone",
]
