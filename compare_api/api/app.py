"""FastAPI application factory for the comparison API."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from compare_api import __version__
from compare_api.api.errors import register_exception_handlers
from compare_api.api.middleware import rate_limit_headers_middleware, request_id_middleware
from compare_api.api.routes import posts, share, system
from compare_api.config import config
from compare_api.core.logging import logger
from compare_api.infrastructure.rate_limit import RateLimiter


def create_app(rate_limiter: Optional[RateLimiter] = None) -> FastAPI:
    """Create and configure FastAPI app. Factory pattern for testability.

    Args:
        rate_limiter: Limiter to use (a fresh one is created when omitted)
    """
    limiter = (
        rate_limiter
        if rate_limiter is not None
        else RateLimiter(sweep_interval=config.rate_limit_sweep_seconds())
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        missing = config.get_missing_config()
        if missing:
            logger.warning("config_incomplete", missing=missing)
        await limiter.start()
        try:
            yield
        finally:
            await limiter.stop()

    app = FastAPI(
        title="compare-api",
        description=(
            "Before/after image comparison posts: upload two images, list, "
            "favorite, share publicly and delete. Backed by Supabase."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.rate_limiter = limiter

    # Add middleware (last added runs first)
    app.middleware("http")(rate_limit_headers_middleware)
    app.middleware("http")(request_id_middleware)

    register_exception_handlers(app)

    # Register routes
    app.include_router(system.router)
    app.include_router(posts.router)
    app.include_router(share.router)

    return app
