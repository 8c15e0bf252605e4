"""
IRIS Finder — Configuration via pydantic-settings.

Environment variables override defaults.  ``PORT``, ``DATABASE_URL``
(or ``ZENMAP_DATABASE_URL``) and ``NODE_ENV`` are honoured without the
``IRIS_`` prefix so the service drops into the PaaS environments that
inject them.
"""

from __future__ import annotations

import re
import ssl
from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Settings(BaseSettings):
    env_path: ClassVar[str] = str(Path(__file__).resolve().parents[2] / ".env")
    model_config = SettingsConfigDict(
        env_file=env_path,
        env_file_encoding="utf-8",
        env_prefix="IRIS_",
        # Ignore unrelated environment variables (POSTGRES_* from
        # docker-compose and the like).
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────
    app_name: str = "IRIS Finder"
    debug: bool = False
    log_level: str = "INFO"
    # "production" turns TLS to the store on unless db_ssl says otherwise.
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("IRIS_ENV", "NODE_ENV"),
    )

    # ── HTTP server ────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("IRIS_PORT", "PORT"),
    )

    # ── Database (PostGIS) ─────────────────────────────────────────
    # A full connection string wins over the individual db_* parts.
    database_dsn: str = Field(
        default="",
        validation_alias=AliasChoices(
            "IRIS_DATABASE_URL", "DATABASE_URL", "ZENMAP_DATABASE_URL",
        ),
    )
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "iris"
    db_password: str = "iris_secret"
    db_name: str = "iris"
    db_pool_size: int = 10
    db_max_overflow: int = 10

    # TLS to the store.  Unset means "on in production".  Certificate
    # checks are off unless db_ssl_verify is set.
    db_ssl: bool | None = None
    db_ssl_verify: bool = False

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy connection string (asyncpg driver)."""
        if self.database_dsn:
            scheme, sep, rest = self.database_dsn.partition("://")
            if sep and scheme in ("postgres", "postgresql"):
                return f"postgresql+asyncpg://{rest}"
            return self.database_dsn
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def use_ssl(self) -> bool:
        if self.db_ssl is not None:
            return self.db_ssl
        return self.environment.lower() == "production"

    @property
    def ssl_connect_args(self) -> dict[str, Any]:
        """``connect_args`` for asyncpg; empty when TLS is disabled."""
        if not self.use_ssl:
            return {}
        context = ssl.create_default_context()
        if not self.db_ssl_verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return {"ssl": context}

    # ── IRIS source table ──────────────────────────────────────────
    iris_schema: str = "decoupages"
    iris_table: str = "iris"
    iris_geom_column: str = "geom"
    # SRID of the stored geometries; anything but 4326 is transformed
    # before the geography cast.
    iris_srid: int = 4326
    # Empty string disables ORDER BY (store-default page order).
    iris_order_column: str = "code_iris"

    @field_validator("iris_schema", "iris_table", "iris_geom_column")
    @classmethod
    def sql_identifier(cls, v: str) -> str:
        if not _IDENTIFIER_RE.match(v):
            raise ValueError(f"Invalid SQL identifier: {v!r}")
        return v

    @field_validator("iris_order_column")
    @classmethod
    def optional_sql_identifier(cls, v: str) -> str:
        if v and not _IDENTIFIER_RE.match(v):
            raise ValueError(f"Invalid SQL identifier: {v!r}")
        return v

    # ── CORS ───────────────────────────────────────────────────────
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
