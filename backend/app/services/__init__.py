"""Services subpackage — business logic and data access."""

from app.services.iris import (
    IrisPage,
    IrisQueryError,
    IrisSearchService,
    build_search_statement,
)

__all__ = [
    "IrisPage",
    "IrisQueryError",
    "IrisSearchService",
    "build_search_statement",
]
