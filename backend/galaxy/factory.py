"""Application factory wiring the galaxy instance into a FastAPI app.

The instance (identity + registry) is loaded exactly once, here, and stored on
``app.state`` for the dependency providers in
:mod:`galaxy.dependencies.galaxy`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import galaxy
from galaxy.config import get_settings
from galaxy.config.loader import load_instance
from galaxy.constants import API_PREFIX
from galaxy.registry import GalaxyInstance
from galaxy.routers.feature import router as feature_router
from galaxy.routers.galaxy import router as galaxy_router
from galaxy.routers.health import router as health_router
from galaxy.routers.metrics import router as metrics_router
from galaxy.routers.orchestrate import router as orchestrate_router
from galaxy.routers.sibling import router as sibling_router

logger = logging.getLogger(__name__)


def configure_logging(level_name: str) -> None:
    """Configure root logging from a level name such as ``INFO``."""
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s - %(name)s - %(message)s")

    # httpx logs every request at INFO; keep it for DEBUG runs only
    if level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan."""
    identity = app.state.galaxy.identity
    logger.info("Starting galaxy %s as %s", identity.id, identity.role.value)

    yield

    logger.info("Shutting down galaxy %s", identity.id)


def create_app(
    instance: Optional[GalaxyInstance] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        instance: Static configuration; loaded from settings when omitted.
        transport: httpx transport used for every outbound call (tests pass
            ``httpx.MockTransport``).
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Galaxy API",
        description="Core/feature call orchestration",
        version=galaxy.__version__,
        lifespan=lifespan,
    )
    app.state.galaxy = instance or load_instance(settings)
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(orchestrate_router, prefix=API_PREFIX)
    app.include_router(feature_router, prefix=API_PREFIX)
    app.include_router(sibling_router, prefix=API_PREFIX)
    app.include_router(galaxy_router, prefix=API_PREFIX)
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(metrics_router)

    return app
