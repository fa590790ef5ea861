"""Main application entry point with FastAPI."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from .api import ROUTERS
from .chat import RecipeChatService
from .config import Settings, get_settings
from .database import (
    check_database_health,
    dispose_engine,
    get_engine,
    get_session_factory,
    init_db,
)
from .errors import NotFoundError, RecipeGenerationError, ValidationError
from .learner import PreferenceLearner
from .llm_service import RecipeGenerator, create_generator
from .ratings import RatingService
from .stores import build_stores

logger = logging.getLogger(__name__)

_UNSET = object()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker | None = None,
    generator: RecipeGenerator | None = _UNSET,
) -> FastAPI:
    """Wire settings, stores and services into a FastAPI app.

    session_factory and generator default to the ones built from settings;
    tests pass their own.
    """
    settings = settings or get_settings()
    owns_engine = session_factory is None
    if owns_engine:
        init_db(get_engine())
        session_factory = get_session_factory()
    if generator is _UNSET:
        generator = create_generator(settings)

    stores = build_stores(settings, session_factory)
    rating_service = RatingService(stores.ratings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup and shutdown."""
        logger.info(
            f"Starting Recipe Assistant (storage={settings.storage_backend}, "
            f"llm={'on' if generator else 'off'})"
        )
        yield
        logger.info("Shutting down Recipe Assistant...")
        if owns_engine:
            dispose_engine()
        logger.info("Recipe Assistant shutdown complete")

    app = FastAPI(
        title="Recipe Assistant",
        description="Recipe suggestions that learn from what you pick and rate",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.stores = stores
    app.state.learner = PreferenceLearner(stores.signals)
    app.state.rating_service = rating_service
    app.state.chat_service = RecipeChatService(
        generator, rating_service, stores.dietary, settings.default_language
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})

    @app.exception_handler(RecipeGenerationError)
    async def generation_error_handler(request: Request, exc: RecipeGenerationError):
        logger.error(f"Recipe generation failed: {exc}")
        return JSONResponse(status_code=502, content={"success": False, "error": str(exc)})

    @app.get("/health")
    async def health_check():
        """Health check endpoint.

        Verifies database connection and returns status.
        """
        db_healthy = check_database_health(app.state.session_factory)

        if db_healthy:
            return {
                "status": "healthy",
                "database": "connected",
                "storage": settings.storage_backend,
            }
        else:
            return {
                "status": "unhealthy",
                "database": "disconnected",
                "storage": settings.storage_backend,
            }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "Recipe Assistant",
            "status": "running",
            "version": "1.0.0",
        }

    for router in ROUTERS:
        app.include_router(router)

    return app


def build_app() -> FastAPI:
    """Factory for `uvicorn --factory recipe_assistant.main:build_app`."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return create_app(settings)
