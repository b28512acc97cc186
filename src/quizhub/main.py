"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown. Middleware, CORS, error
handlers and routers are all registered here; each concern lives in its
own module.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quizhub import __version__
from quizhub.api import api_router
from quizhub.auth.gate import AuthenticationGate
from quizhub.config import settings
from quizhub.errors import install_error_handlers
from quizhub.middleware.request_id import RequestIdMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    from quizhub.db.engine import create_schema, engine

    logger.info(
        "quizhub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.create_schema_on_startup:
        await create_schema(engine)
        logger.info("quizhub.schema_created")

    yield

    logger.info("quizhub.shutdown")
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="QuizHub",
        description="Quiz authoring for owners, server-scored attempts for takers",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → AuthenticationGate → router
    #               (route policy dependency) → handler
    app.add_middleware(AuthenticationGate)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: quizhub.main:app)
app = create_app()
