"""
IRIS Search Endpoint
====================
Radius search over IRIS zones powered by PostGIS ST_DWithin.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models.database import get_db
from app.schemas.iris import (
    SEARCH_ERROR_MESSAGE,
    ErrorResponse,
    IrisSearchRequest,
    IrisSearchResponse,
)
from app.services.iris import IrisQueryError, IrisSearchService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["IRIS"])


@router.post(
    "/find-iris",
    response_model=IrisSearchResponse,
    responses={500: {"model": ErrorResponse}},
)
async def find_iris(
    req: IrisSearchRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Return the IRIS zones within ``radius`` km of (``latitude``,
    ``longitude``), one page at a time.

    ``total`` counts every matching zone; ``results`` holds at most
    ``limit`` of them, starting at ``(page - 1) * limit``.
    """
    svc = IrisSearchService(db, get_settings())
    try:
        found = await svc.find_iris(
            latitude=req.latitude,
            longitude=req.longitude,
            radius_km=req.radius,
            limit=req.limit,
            offset=req.offset,
        )
    except IrisQueryError:
        logger.exception("IRIS search failed")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=SEARCH_ERROR_MESSAGE).model_dump(),
        )

    logger.info("IRIS found (total): %d", found.total)
    logger.info("IRIS on page %d: %d", req.page, len(found.results))

    return IrisSearchResponse(
        page=req.page,
        limit=req.limit,
        total=found.total,
        results=found.results,
    )
