"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from property_search import __version__
from property_search.config import Settings
from property_search.db import PropertyStorage
from property_search.logging import configure_logging, get_logger

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Application settings. Loaded from env if not provided.
    """
    if settings is None:
        settings = Settings()

    configure_logging(json_output=settings.log_json)

    storage = PropertyStorage(settings.database_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await storage.initialize()
        app.state.repository = storage
        app.state.settings = settings
        logger.info("web_server_started", database=settings.database_path)

        yield

        await storage.close()
        logger.info("web_server_stopped")

    app = FastAPI(title="Property Search", version=__version__, lifespan=lifespan)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    # Register routes
    from property_search.web.routes import router

    app.include_router(router)

    return app
