"""Application configuration via environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", case_sensitive=False)

    app_port: int = Field(8000, alias="APP_PORT")
    strapi_url: str = Field("http://localhost:1337", alias="STRAPI_URL")
    strapi_api_token: str = Field("", alias="STRAPI_API_TOKEN")
    strapi_token_file: Path = Field(
        default_factory=lambda: Path(".api_token"), alias="STRAPI_TOKEN_FILE"
    )
    blog_dir: Path = Field(
        default_factory=lambda: Path("../src/MainBundle/Resources/views/common/asigurari/blog"),
        alias="BLOG_DIR",
    )
    blog_systems: list[str] = Field(
        default_factory=lambda: [
            "rca",
            "casco",
            "travel",
            "home",
            "life",
            "health",
            "malpraxis",
            "cmr",
            "breakdown",
            "accidents",
            "common",
            "rcp",
        ],
        alias="BLOG_SYSTEMS",
    )
    blog_skip_files: list[str] = Field(
        default_factory=lambda: ["_blocks", "macros", "blog.html.twig"], alias="BLOG_SKIP_FILES"
    )
    system_aliases: dict[str, str] = Field(
        default_factory=lambda: {"rcp": "malpraxis"}, alias="SYSTEM_ALIASES"
    )
    request_delay_seconds: float = Field(0.1, alias="REQUEST_DELAY_SECONDS")
    request_timeout_seconds: float = Field(20.0, alias="REQUEST_TIMEOUT_SECONDS")
    paragraph_separator: str = Field("|", alias="PARAGRAPH_SEPARATOR")
    raw_fallback_max_chars: int = Field(2000, alias="RAW_FALLBACK_MAX_CHARS")
    excerpt_max_chars: int = Field(490, alias="EXCERPT_MAX_CHARS")
    meta_title_max_chars: int = Field(70, alias="META_TITLE_MAX_CHARS")
    meta_description_max_chars: int = Field(160, alias="META_DESCRIPTION_MAX_CHARS")
    words_per_minute: int = Field(200, alias="WORDS_PER_MINUTE")
    author_name: str = Field("Echipa asigurari.ro", alias="AUTHOR_NAME")
    review_status: str = Field("approved", alias="REVIEW_STATUS")
    max_source_chars: int = Field(500_000, alias="MAX_SOURCE_CHARS")
    report_dir: Path = Field(default_factory=lambda: Path("data/migration"), alias="REPORT_DIR")

    @property
    def blog_dir_exists(self) -> bool:
        """Return True if the Twig blog directory exists."""
        return self.blog_dir.exists()

    def resolve_api_token(self) -> str:
        """Return the API token from the environment or the token file."""
        if self.strapi_api_token:
            return self.strapi_api_token.strip()
        if self.strapi_token_file.exists():
            return self.strapi_token_file.read_text(encoding="utf-8").strip()
        return ""


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
