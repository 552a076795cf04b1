"""FastAPI application for the Story API.

This module provides the application factory, health endpoints, error
handlers and lifecycle management. The token-to-team mapping and the
storage backend are set up at startup; failing to load the mapping stops
the process from starting.

Run with:
    uvicorn story_api.main:app --reload

Examples:
    >>> # Health check
    >>> curl http://localhost:8080/health

    >>> # Create a story
    >>> curl -X POST -H "Authorization: Bearer $TOKEN" \\
    ...     -d '{"title": "Budget 2024"}' http://localhost:8080/api/v1/story

Tests:
    - tests/unit/test_main.py::TestHealthEndpoint
    - tests/unit/test_main.py::TestStartup
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from story_api import __version__
from story_api.api.v1 import router as v1_router
from story_api.auth.tokens import TeamTokens, TokenMappingError, load_team_tokens
from story_api.config import Settings, get_settings
from story_api.storage.backends.base import StorageBackend
from story_api.storage.factory import create_backend
from story_api.stories.errors import INTERNAL_MESSAGE, StoryError
from story_api.stories.locks import KeyedLocks
from story_api.stories.service import StoryService

logger = logging.getLogger(__name__)


# Response models
class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    teams: int
    storage: str


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the JSON error body used by every endpoint."""
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def create_app(
    settings: Settings | None = None,
    tokens: TeamTokens | None = None,
    backend: StorageBackend | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use (defaults to get_settings()).
        tokens: Preloaded token mapping; loaded at startup if omitted.
        backend: Storage backend; created from settings if omitted.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager.

        Loads the token mapping, builds the storage backend and the story
        service. Any failure here aborts startup.
        """
        logger.info(f"Starting Story API v{__version__} ({settings.ENVIRONMENT.value})")

        team_tokens = tokens
        if team_tokens is None:
            try:
                team_tokens = await asyncio.to_thread(load_team_tokens, settings)
            except TokenMappingError:
                logger.exception("Fetching token team mapping failed")
                raise

        storage = backend or create_backend(settings.get_storage_config())
        app.state.story_service = StoryService(
            backend=storage,
            tokens=team_tokens,
            root=settings.STORY_ROOT,
            locks=KeyedLocks(enabled=settings.STORY_LOCKS_ENABLED),
        )
        logger.info(f"Story API ready ({storage.name} storage, root '{settings.STORY_ROOT}')")

        yield

        logger.info("Shutting down Story API")

    app = FastAPI(
        title="Story API",
        description="Publish and update team-owned story bundles",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.include_router(v1_router)

    # Exception handlers
    @app.exception_handler(StoryError)
    async def story_error_handler(request: Request, exc: StoryError):
        """Convert workflow errors to their status and message."""
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent response format."""
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report request validation failures as bad requests."""
        logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
        return error_response(status.HTTP_400_BAD_REQUEST, "invalid request")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions without leaking detail."""
        logger.exception(f"Unexpected error: {exc}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_MESSAGE)

    # Health endpoints
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> HealthResponse:
        """Check application health.

        Returns:
            HealthResponse with version, team count and storage backend.
        """
        service: StoryService = request.app.state.story_service
        return HealthResponse(
            status="healthy",
            version=__version__,
            teams=len(service.tokens.teams),
            storage=service.backend.name,
        )

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint with basic info."""
        return {
            "name": "Story API",
            "version": __version__,
            "health": "/health",
        }

    return app


# Configure logging
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app()


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "story_api.main:app",
        host="0.0.0.0",
        port=8080,
        reload=get_settings().DEBUG,
    )
