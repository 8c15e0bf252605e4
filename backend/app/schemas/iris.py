"""
Pydantic schemas for the IRIS search request/response.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SEARCH_ERROR_MESSAGE = "Une erreur est survenue lors de la recherche des IRIS"


# ═══════════════════════════════════════════════════════════════════
# Request
# ═══════════════════════════════════════════════════════════════════
class IrisSearchRequest(BaseModel):
    """
    Body of ``POST /find-iris``.

    Numbers may arrive as numeric strings; pydantic's lax mode coerces
    them.  NaN and infinities are rejected instead of being passed on
    to the store.
    """

    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)
    radius: float = Field(
        ge=0,
        allow_inf_nan=False,
        description="Search radius in kilometres",
    )
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=100, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# ═══════════════════════════════════════════════════════════════════
# Response
# ═══════════════════════════════════════════════════════════════════
class IrisZone(BaseModel):
    """One IRIS row.  Columns beyond code and name are passed through."""

    model_config = ConfigDict(extra="allow")

    code_iris: str | None = None
    nom_iris: str | None = None


class IrisSearchResponse(BaseModel):
    page: int
    limit: int
    total: int = Field(ge=0)
    results: list[IrisZone] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
