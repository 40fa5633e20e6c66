"""Discover blog templates and push them to Strapi."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence, TypedDict

from loguru import logger

from blogmigrator.config import Settings, get_settings
from blogmigrator.services.strapi.client import StrapiClient
from blogmigrator.services.strapi.payload import build_post_payload
from blogmigrator.services.twig.blocks import build_blocks
from blogmigrator.services.twig.grammar import parse_article
from blogmigrator.services.twig.models import ArticleSource

TEMPLATE_SUFFIX = ".html.twig"


@dataclass(frozen=True)
class ArticleFile:
    system: str
    slug: str
    path: Path

    @property
    def label(self) -> str:
        return f"{self.system}/{self.slug}"


class FailedArticle(TypedDict):
    article: str
    error: str


class MigrationStats(TypedDict):
    total: int
    success: int
    skipped: int
    failed: int
    errors: list[FailedArticle]


def discover_articles(
    blog_dir: Path,
    systems: Iterable[str],
    skip_files: Sequence[str],
    system_filter: str | None = None,
) -> List[ArticleFile]:
    """List article templates per system directory, in a stable order."""
    articles: List[ArticleFile] = []
    for system in systems:
        if system_filter and system != system_filter:
            continue
        system_dir = blog_dir / system
        if not system_dir.is_dir():
            logger.warning(f"{system}: directory not found, skipping")
            continue
        for path in sorted(system_dir.glob(f"*{TEMPLATE_SUFFIX}")):
            if any(token in path.name for token in skip_files):
                continue
            slug = path.name[: -len(TEMPLATE_SUFFIX)]
            articles.append(ArticleFile(system=system, slug=slug, path=path))
    return articles


def _migrate_one(
    item: ArticleFile,
    client: StrapiClient | None,
    categories: dict[str, str],
    *,
    dry_run: bool,
    update_existing: bool,
    settings: Settings,
) -> str:
    """Migrate one template and return its outcome: created, updated, dry-run or skipped."""
    source = ArticleSource(
        category=item.system, slug=item.slug, text=item.path.read_text(encoding="utf-8")
    )
    article = parse_article(source, raw_fallback_max_chars=settings.raw_fallback_max_chars)
    if not article.has_content:
        return "skipped"

    blocks = build_blocks(
        article,
        separator=settings.paragraph_separator,
        raw_fallback_max_chars=settings.raw_fallback_max_chars,
    )
    payload = build_post_payload(
        article,
        blocks,
        category=item.system,
        slug=item.slug,
        category_id=categories.get(item.system),
        settings=settings,
    )
    if dry_run or client is None:
        logger.info(
            f"{item.label}: title={payload['data']['title'][:60]!r} "
            f"blocks={len(blocks)} reading={payload['data']['readingTime']}min"
        )
        return "dry-run"

    existing = client.find_post(item.slug)
    if existing:
        if not update_existing:
            return "skipped"
        client.update_post(str(existing.get("documentId")), payload)
        return "updated"
    client.create_post(payload)
    return "created"


def migrate_articles(
    articles: Sequence[ArticleFile],
    client: StrapiClient | None,
    *,
    dry_run: bool = False,
    limit: int = 0,
    update_existing: bool = False,
    settings: Settings | None = None,
) -> MigrationStats:
    """Parse and upload articles. Per-article failures are recorded, not raised."""
    settings = settings or get_settings()
    categories: dict[str, str] = {}
    if client is not None and not dry_run:
        categories = client.list_categories()
        for alias, target in settings.system_aliases.items():
            if target in categories:
                categories.setdefault(alias, categories[target])

    stats: MigrationStats = {"total": 0, "success": 0, "skipped": 0, "failed": 0, "errors": []}
    selected = articles[:limit] if limit > 0 else articles
    for idx, item in enumerate(selected, start=1):
        stats["total"] += 1
        prefix = f"[{idx}/{len(selected)}] {item.label}"
        try:
            outcome = _migrate_one(
                item,
                client,
                categories,
                dry_run=dry_run,
                update_existing=update_existing,
                settings=settings,
            )
        except Exception as exc:  # noqa: BLE001 - recorded per article
            logger.error(f"{prefix} -> ERROR: {exc}")
            stats["failed"] += 1
            stats["errors"].append({"article": item.label, "error": str(exc)})
            continue

        logger.info(f"{prefix} -> {outcome.upper()}")
        if outcome == "skipped":
            stats["skipped"] += 1
        else:
            stats["success"] += 1
    return stats
