"""
IRIS Finder — FastAPI Application
=================================
Radius search over French IRIS zones, backed by PostGIS.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.models.database import create_engine_from_settings, create_session_factory
from app.routers import iris

logger = logging.getLogger(__name__)
settings = get_settings()


# ── Lifespan (startup / shutdown) ─────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
        - Build the pooled PostGIS engine and session factory and
          attach them to ``app.state``.
    Shutdown:
        - Dispose engine pool.

    The pool connects lazily, so an unreachable store does not stop the
    process from starting; searches answer 500 until it comes back.
    """
    engine = create_engine_from_settings(settings)
    app.state.db_engine = engine
    app.state.session_factory = create_session_factory(engine)

    logger.info("%s listening on port %d", settings.app_name, settings.port)

    try:
        yield
    finally:
        await engine.dispose()
        logger.info("%s shut down.", settings.app_name)


# ── Validation errors ─────────────────────────────────────────────
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    422 with pydantic's error list, minus the echoed ``input`` and
    ``ctx``.  A rejected NaN or infinity would otherwise be echoed back
    and break JSON serialisation of the error response itself.
    """
    errors = [
        {k: v for k, v in err.items() if k not in ("input", "ctx")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


# ── App factory ───────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Paginated radius search over IRIS zones using PostGIS "
            "geodesic distance."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(iris.router)

    return app


def run() -> None:
    """Console entry point: configure logging and serve on ``settings.port``."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# ── Module-level app instance (for `uvicorn app.main:app`) ───────
app = create_app()  # pragma: no cover
