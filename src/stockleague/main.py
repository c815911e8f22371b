"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stockleague.api.routers import (
    imports_router,
    players_router,
    portfolio_router,
    stocks_router,
    trades_router,
)
from stockleague.app_context import LeagueContext
from stockleague.config.logging_config import setup_logging
from stockleague.config.settings import Settings
from stockleague.core.exceptions import (
    AppError,
    AuthenticationError,
    NotFoundError,
    PersistenceError,
)

logger = logging.getLogger(__name__)


def error_status(exc: AppError) -> int:
    """HTTP status for an application error."""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, PersistenceError):
        return 503
    return 400


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[LeagueContext] = None,
) -> FastAPI:
    """
    Build the API around one LeagueContext.

    The context is created at startup from settings unless one is supplied.
    """
    if context is not None:
        settings = context.settings
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        setup_logging(settings)
        app.state.context = context if context is not None else LeagueContext(settings)
        logger.info("%s %s started", settings.app_name, settings.app_version)
        yield
        # Shutdown (nothing to clean up)

    app = FastAPI(
        title=settings.app_name,
        description="Stock trading competition ledger and standings",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(players_router)
    app.include_router(trades_router)
    app.include_router(portfolio_router)
    app.include_router(imports_router)
    app.include_router(stocks_router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Global handler for application errors."""
        status_code = error_status(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "message": exc.message},
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/")
    def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    return app


app = create_app()
