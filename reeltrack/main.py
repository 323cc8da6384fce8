import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from reeltrack.api import auth, catalog, user
from reeltrack.core.config import Settings, settings as default_settings
from reeltrack.core.errors import ReeltrackError
from reeltrack.core.log import setup_logging
from reeltrack.db.catalog_store import CatalogStore
from reeltrack.db.database import Database
from reeltrack.db.watchlist_store import WatchlistStore
from reeltrack.services.watchlist import WatchlistService
from reeltrack.tmdb.gateway import MetadataGateway

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ReeltrackError)
    async def reeltrack_error(request: Request, exc: ReeltrackError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request: " + "; ".join(e.get("msg", "") for e in exc.errors()))

    @app.exception_handler(Exception)
    async def unknown_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, str(exc) or "Unknown server error")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application.

    Clients (HTTP, database) are created in the lifespan and shared through
    `app.state`; `transport` replaces the network for the TMDB client.
    """
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.DATABASE_URL)
        await database.create_all()
        http = httpx.AsyncClient(timeout=settings.TMDB_TIMEOUT, transport=transport)

        if not settings.TMDB_API_KEY:
            logger.warning("TMDB_API_KEY is not set, catalog endpoints will answer 500")

        gateway = MetadataGateway.from_settings(http, settings)
        app.state.settings = settings
        app.state.database = database
        app.state.gateway = gateway
        app.state.watchlist_service = WatchlistService(
            gateway=gateway,
            catalog=CatalogStore(database),
            watchlists=WatchlistStore(database),
        )
        logger.info("reeltrack started (database: %s)", database.dialect)
        try:
            yield
        finally:
            await http.aclose()
            await database.dispose()

    app = FastAPI(title="reeltrack", lifespan=lifespan)
    app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY)

    # API routers
    app.include_router(auth.router)
    app.include_router(catalog.router)
    app.include_router(user.router)

    register_error_handlers(app)
    return app


app = create_app()
