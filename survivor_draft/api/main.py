"""
FastAPI application factory and configuration.

This follows the application factory pattern, making testing easier
and allowing for different configurations (dev, test, prod).
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import AppConfig, get_config
from ..database.executor import QueryExecutor, QueryFailedError
from ..database.pool import ConnectionPool
from ..database.service import NotFoundError, PickRejectedError, SurvivorService
from ..utils.draft_order import DraftOrderError
from .middleware.cors import setup_cors
from .routes.draft import router as draft_router
from .routes.health import router as health_router
from .routes.players import router as players_router
from .routes.seasons import router as seasons_router
from .routes.teams import router as teams_router

logging.basicConfig(level=logging.INFO,
                    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up Survivor Draft API...")

    config: AppConfig = app.state.config

    # The pool lives for the whole process; handlers only borrow sessions
    pool = ConnectionPool(config)
    await pool.open()

    app.state.pool = pool
    app.state.executor = QueryExecutor(
        pool,
        max_attempts=config.query_max_attempts,
        base_delay=config.query_retry_base_delay,
    )
    app.state.service = SurvivorService(app.state.executor)

    logger.info("Startup complete")

    yield

    logger.info("Shutting down Survivor Draft API...")
    await pool.close()
    logger.info("Shutdown complete")


def _error(status_code: int, error_type: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": error_type, "message": message, **extra}},
    )


def create_app(config: Dict[str, Any] = None, app_config: Optional[AppConfig] = None) -> FastAPI:
    """
    Application factory function.

    Args:
        config: Overrides for title/description/version/debug/cors_origins
        app_config: Full application config; read from the environment if omitted
    """
    app_config = app_config or get_config()

    # Default configuration
    default_config = {
        "title": "Survivor Fantasy Draft",
        "description": "Admin API for the Survivor fantasy draft",
        "version": "1.0.0",
        "debug": app_config.debug,
        "cors_origins": app_config.cors_origins,
    }

    # Merge with provided config
    if config:
        default_config.update(config)

    app = FastAPI(
        title=default_config["title"],
        description=default_config["description"],
        version=default_config["version"],
        debug=default_config["debug"],
        lifespan=lifespan,
        docs_url="/docs" if default_config["debug"] else None,
        redoc_url="/redoc" if default_config["debug"] else None,
    )
    app.state.config = app_config
    app.state.version = default_config["version"]

    setup_cors(app, default_config["cors_origins"])

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add response time header for monitoring."""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests for monitoring and debugging."""
        start_time = time.time()
        logger.info(f"Request: {request.method} {request.url}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {response.status_code} - {process_time:.3f}s - {request.method} {request.url.path}"
        )
        return response

    # Exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent format."""
        return _error(exc.status_code, "http_error", exc.detail, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        return _error(422, "validation_error", "Request validation failed", details=jsonable_encoder(exc.errors()))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(404, "not_found", str(exc))

    @app.exception_handler(PickRejectedError)
    async def pick_rejected_handler(request: Request, exc: PickRejectedError):
        return _error(409, "pick_rejected", str(exc))

    @app.exception_handler(DraftOrderError)
    async def draft_order_handler(request: Request, exc: DraftOrderError):
        return _error(422, "draft_order_error", str(exc), reason=type(exc).__name__)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error(422, "validation_error", str(exc))

    @app.exception_handler(QueryFailedError)
    async def query_failed_handler(request: Request, exc: QueryFailedError):
        """Database failures: 503 once retries ran out, 500 for fatal query errors."""
        logger.error(f"Query failed after {exc.attempts} attempt(s): {exc.message}")
        status_code = 503 if exc.transient else 500
        return _error(
            status_code,
            "database_error",
            "Database temporarily unavailable" if exc.transient else "Database query failed",
            details=exc.message if default_config["debug"] else None,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return _error(
            500,
            "internal_error",
            "An unexpected error occurred",
            # Don't leak error details in production
            details=str(exc) if default_config["debug"] else None,
        )

    # Include routers
    app.include_router(health_router, prefix="/api/v1", tags=["health"])
    app.include_router(seasons_router, prefix="/api/v1", tags=["seasons"])
    app.include_router(players_router, prefix="/api/v1", tags=["players"])
    app.include_router(teams_router, prefix="/api/v1", tags=["teams"])
    app.include_router(draft_router, prefix="/api/v1", tags=["draft"])

    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": default_config["title"],
            "version": default_config["version"],
            "description": default_config["description"],
            "docs_url": "/docs" if default_config["debug"] else None,
            "health_check": "/api/v1/health",
        }

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "survivor_draft.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
