"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (schema, engine disposal).
Middleware, CORS, error handlers and routers are all registered here,
and the TokenService is built once and parked on app.state so the access
gate can reach it without a module global.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from webforum import __version__
from webforum.api import api_router
from webforum.auth.jwt import TokenService
from webforum.config import Settings, settings as default_settings
from webforum.errors import register_error_handlers
from webforum.log import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "webforum.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from webforum.db.engine import create_schema, engine

    if settings.auto_create_schema:
        await create_schema(engine)
        logger.info("webforum.schema_ready")

    yield

    logger.info("webforum.shutdown")
    await engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="WebForum",
        description="Discussion forum backend — accounts, threads, comments, categories, tags",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_service = TokenService.from_settings(settings)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler

    from webforum.middleware.request_id import RequestIdMiddleware
    from webforum.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: webforum.main:app)
app = create_app()
