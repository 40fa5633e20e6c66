"""Health and readiness routes."""

from fastapi import APIRouter, HTTPException

from blogmigrator.config import get_settings

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    """Simple liveness probe."""
    return {"status": "ok"}


@router.get("/ready")
def ready() -> dict[str, str]:
    """
    Readiness probe.

    The migrator is ready when the Twig blog directory exists and a Strapi
    API token is configured (env var or token file).
    """
    settings = get_settings()
    missing: list[str] = []
    if not settings.blog_dir_exists:
        missing.append(f"blog directory {settings.blog_dir}")
    if not settings.resolve_api_token():
        missing.append("Strapi API token")
    if missing:
        raise HTTPException(status_code=503, detail="Missing: " + ", ".join(missing))
    return {"status": "ok", "strapi_url": settings.strapi_url}
