import logging
import os

import asyncpg
import msgspec
import sentry_sdk
from litestar import Litestar, Router, get
from litestar.config.cors import CORSConfig
from litestar.datastructures import State
from litestar.exceptions import HTTPException
from litestar.logging import LoggingConfig
from litestar.middleware import DefineMiddleware
from litestar.openapi import OpenAPIConfig
from litestar.openapi.plugins import ScalarRenderPlugin

from middleware.auth import AUTH_EXCLUDED_PATHS, CustomAuthenticationMiddleware
from routes import route_handlers
from utilities.errors import http_exception_handler, internal_error_handler

log = logging.getLogger(__name__)

APP_ENVIRONMENT = os.getenv("APP_ENVIRONMENT", "development")
SENTRY_DSN = os.getenv("SENTRY_DSN")


def _build_dsn() -> str:
    if dsn := os.getenv("PSQL_DSN"):
        return dsn
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    database = os.getenv("POSTGRES_DB", "shadow_system")
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


async def _async_pg_init(conn: asyncpg.Connection) -> None:
    """Register JSON codecs on every new connection."""
    await conn.set_type_codec(
        "jsonb",
        schema="pg_catalog",
        encoder=lambda v: msgspec.json.encode(v).decode(),
        decoder=msgspec.json.decode,
    )
    await conn.set_type_codec(
        "json",
        schema="pg_catalog",
        encoder=lambda v: msgspec.json.encode(v).decode(),
        decoder=msgspec.json.decode,
    )


class HealthStatus(msgspec.Struct):
    status: str


@get("/healthcheck", summary="Health Check", tags=["Meta"])
async def healthcheck(state: State) -> HealthStatus:
    """Check that the API can reach the database."""
    async with state.db_pool.acquire() as conn:
        await conn.execute("SELECT 1")
    return HealthStatus(status="ok")


def create_app(psql_dsn: str | None = None) -> Litestar:
    """Build the Litestar application.

    Args:
        psql_dsn: Database DSN. Falls back to ``PSQL_DSN`` or the ``POSTGRES_*`` variables.

    Returns:
        The configured application.
    """
    dsn = psql_dsn or _build_dsn()

    if SENTRY_DSN:
        sentry_sdk.init(
            dsn=SENTRY_DSN,
            environment=APP_ENVIRONMENT,
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
        )

    async def _open_pool(app: Litestar) -> None:
        app.state.db_pool = await asyncpg.create_pool(
            dsn,
            min_size=int(os.getenv("PSQL_POOL_MIN_SIZE", "1")),
            max_size=int(os.getenv("PSQL_POOL_MAX_SIZE", "10")),
            init=_async_pg_init,
        )
        log.info("Database pool ready")

    async def _close_pool(app: Litestar) -> None:
        pool = getattr(app.state, "db_pool", None)
        if pool is not None:
            await pool.close()

    logging_config = LoggingConfig(
        root={"level": "DEBUG" if APP_ENVIRONMENT == "development" else "INFO", "handlers": ["queue_listener"]},
        formatters={"standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}},
    )

    cors_origins = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

    api_router = Router(path="/api", route_handlers=route_handlers)

    return Litestar(
        route_handlers=[healthcheck, api_router],
        on_startup=[_open_pool],
        on_shutdown=[_close_pool],
        middleware=[DefineMiddleware(CustomAuthenticationMiddleware, exclude=list(AUTH_EXCLUDED_PATHS))],
        exception_handlers={
            HTTPException: http_exception_handler,
            Exception: internal_error_handler,
        },
        cors_config=CORSConfig(allow_origins=cors_origins),
        logging_config=logging_config,
        openapi_config=OpenAPIConfig(
            title="Shadow System API",
            version="1.0.0",
            path="/docs",
            render_plugins=[ScalarRenderPlugin()],
        ),
        debug=APP_ENVIRONMENT == "development",
    )


app = create_app()
