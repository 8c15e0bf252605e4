"""
Lightweight SQLAlchemy Core handle for the IRIS source table.

The table is owned by the data-loading pipeline, not by this service,
and its column set varies between IRIS releases.  Only the columns the
search touches are declared; the query itself selects ``*`` so every
other attribute flows through to the response untouched.
"""

from __future__ import annotations

from sqlalchemy import TableClause, column, table

from app.config import Settings

CODE_COLUMN = "code_iris"
NAME_COLUMN = "nom_iris"


def iris_table(settings: Settings) -> TableClause:
    """Return a ``TableClause`` for the configured IRIS table."""
    columns = {settings.iris_geom_column, CODE_COLUMN, NAME_COLUMN}
    if settings.iris_order_column:
        columns.add(settings.iris_order_column)
    return table(
        settings.iris_table,
        *(column(name) for name in sorted(columns)),
        schema=settings.iris_schema,
    )
