"""
IRIS Search Service
===================
One PostGIS round trip per search.

The statement filters the IRIS table once into a ``filtered`` CTE using
a geodesic ``ST_DWithin`` on ``geography``, then reads both the total
count and the requested page (aggregated with ``json_agg``) from it:

    WITH filtered AS (SELECT * FROM iris WHERE ST_DWithin(...))
    SELECT (SELECT count(*) FROM filtered)                     AS total,
           coalesce((SELECT json_agg(page ORDER BY code_iris)
                     FROM (SELECT * FROM filtered
                           ORDER BY code_iris
                           LIMIT :limit OFFSET :offset) AS page),
                    '[]'::json)                                 AS results
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from geoalchemy2 import Geography
from geoalchemy2.functions import ST_DWithin, ST_MakePoint, ST_SetSRID, ST_Transform
from sqlalchemy import JSON, Select, cast, column, func, literal_column, select
from sqlalchemy.dialects.postgresql import aggregate_order_by
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.models.iris import iris_table
from app.schemas.iris import IrisZone

logger = logging.getLogger(__name__)

WGS84_SRID = 4326
_GEOGRAPHY = Geography(geometry_type="GEOMETRY", srid=WGS84_SRID)


class IrisQueryError(Exception):
    """The spatial store could not answer an IRIS search."""


@dataclass(frozen=True, slots=True)
class IrisPage:
    """Total candidate count plus one materialized page of rows."""

    total: int
    results: list[IrisZone] = field(default_factory=list)


def build_search_statement(
    settings: Settings,
    latitude: float,
    longitude: float,
    radius_km: float,
    limit: int,
    offset: int,
) -> Select:
    """Build the single count-plus-page statement for a radius search."""
    zones = iris_table(settings)

    geom = zones.c[settings.iris_geom_column]
    if settings.iris_srid != WGS84_SRID:
        geom = ST_Transform(geom, WGS84_SRID)

    # PostGIS points are (x, y) = (longitude, latitude).
    point = ST_SetSRID(ST_MakePoint(longitude, latitude), WGS84_SRID)

    filtered = (
        select(literal_column("*"))
        .select_from(zones)
        .where(
            ST_DWithin(
                cast(geom, _GEOGRAPHY),
                cast(point, _GEOGRAPHY),
                radius_km * 1000,
            )
        )
        .cte("filtered")
    )

    page_stmt = select(literal_column("*")).select_from(filtered)
    if settings.iris_order_column:
        page_stmt = page_stmt.order_by(column(settings.iris_order_column))
    page = page_stmt.limit(limit).offset(offset).subquery("page")

    page_row = literal_column(page.name)
    if settings.iris_order_column:
        aggregated = func.json_agg(
            aggregate_order_by(page_row, column(settings.iris_order_column)),
            type_=JSON,
        )
    else:
        aggregated = func.json_agg(page_row, type_=JSON)

    total = select(func.count()).select_from(filtered).scalar_subquery()
    results = select(aggregated).select_from(page).scalar_subquery()

    return select(
        total.label("total"),
        func.coalesce(
            results, literal_column("'[]'::json", type_=JSON), type_=JSON
        ).label("results"),
    )


class IrisSearchService:
    """
    Runs IRIS radius searches against PostGIS.
    Uses the injected AsyncSession; holds no other state.
    """

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        self.session = session
        self.settings = settings or get_settings()

    async def find_iris(
        self,
        latitude: float,
        longitude: float,
        radius_km: float,
        limit: int,
        offset: int,
    ) -> IrisPage:
        """
        Return the number of IRIS zones within *radius_km* of the point
        and the ``limit`` rows that follow ``offset`` among them.

        Raises
        ------
        IrisQueryError
            For any failure while talking to the store.  The original
            exception is chained.
        """
        stmt = build_search_statement(
            self.settings, latitude, longitude, radius_km, limit, offset
        )
        try:
            result = await self.session.execute(stmt)
            row = result.one_or_none()
            if row is None:
                return IrisPage(total=0)
            return IrisPage(
                total=int(row.total or 0),
                results=[IrisZone.model_validate(r) for r in row.results or []],
            )
        except Exception as exc:
            raise IrisQueryError("IRIS search query failed") from exc
