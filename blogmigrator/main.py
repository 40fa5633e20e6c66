"""FastAPI entrypoint for the Twig blog migrator."""

from fastapi import FastAPI

from blogmigrator.api.routes_articles import router as articles_router
from blogmigrator.api.routes_health import router as health_router
from blogmigrator.config import get_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    application = FastAPI(
        title="Twig Blog Migrator",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    application.include_router(health_router)
    application.include_router(articles_router)

    # Store settings on state for future use.
    application.state.settings = settings
    return application


app = create_app()
