import shutil
from pathlib import Path
from typing import Any

import pytest

from blogmigrator.config import Settings
from blogmigrator.services.migration import ArticleFile, discover_articles, migrate_articles
from blogmigrator.services.strapi.client import StrapiError

FIXTURES = Path(__file__).parent / "fixtures"
SYSTEMS = ["rca", "home", "common", "rcp", "travel"]
SKIP = ["_blocks", "macros", "blog.html.twig"]


class FakeClient:
    def __init__(self, existing: dict[str, str] | None = None, fail_on: str = "") -> None:
        self.existing = existing or {}
        self.fail_on = fail_on
        self.created: list[dict[str, Any]] = []
        self.updated: list[tuple[str, dict[str, Any]]] = []

    def list_categories(self) -> dict[str, str]:
        return {"rca": "doc-rca", "home": "doc-home", "malpraxis": "doc-malpraxis"}

    def find_post(self, slug: str) -> dict[str, Any] | None:
        if slug in self.existing:
            return {"documentId": self.existing[slug], "slug": slug}
        return None

    def create_post(self, payload: dict[str, Any]) -> dict[str, Any]:
        if payload["data"]["slug"] == self.fail_on:
            raise StrapiError("slug must be unique", status=400)
        self.created.append(payload)
        return {"data": payload["data"]}

    def update_post(self, document_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.updated.append((document_id, payload))
        return {"data": payload["data"]}


@pytest.fixture
def blog_dir(tmp_path: Path) -> Path:
    layout = {
        "rca/ce-este-rca.html.twig": "named_object.html.twig",
        "rca/_blocks_header.html.twig": "raw_fallback.html.twig",
        "rca/macros.html.twig": "raw_fallback.html.twig",
        "home/locuinta.html.twig": "positional_call.html.twig",
        "common/contact.html.twig": "raw_fallback.html.twig",
        "common/gol.html.twig": "empty.html.twig",
        "rcp/malpraxis-medical.html.twig": "named_object.html.twig",
    }
    for target, fixture in layout.items():
        path = tmp_path / target
        path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy(FIXTURES / fixture, path)
    (tmp_path / "blog.html.twig").write_text("{% block body %}{% endblock %}", encoding="utf-8")
    (tmp_path / "rca" / "notes.txt").write_text("not a template", encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings() -> Settings:
    return Settings().model_copy(update={"blog_systems": SYSTEMS, "blog_skip_files": SKIP})


def test_discover_articles_order_and_skips(blog_dir: Path) -> None:
    articles = discover_articles(blog_dir, SYSTEMS, SKIP)
    assert [item.label for item in articles] == [
        "rca/ce-este-rca",
        "home/locuinta",
        "common/contact",
        "common/gol",
        "rcp/malpraxis-medical",
    ]
    assert articles[0] == ArticleFile(
        system="rca", slug="ce-este-rca", path=blog_dir / "rca" / "ce-este-rca.html.twig"
    )


def test_discover_articles_system_filter(blog_dir: Path) -> None:
    articles = discover_articles(blog_dir, SYSTEMS, SKIP, system_filter="home")
    assert [item.slug for item in articles] == ["locuinta"]


def test_dry_run_counts_and_skips_empty_templates(blog_dir: Path, settings: Settings) -> None:
    articles = discover_articles(blog_dir, SYSTEMS, SKIP)
    stats = migrate_articles(articles, None, dry_run=True, settings=settings)
    assert stats == {"total": 5, "success": 4, "skipped": 1, "failed": 0, "errors": []}


def test_limit_caps_processed_articles(blog_dir: Path, settings: Settings) -> None:
    articles = discover_articles(blog_dir, SYSTEMS, SKIP)
    stats = migrate_articles(articles, None, dry_run=True, limit=2, settings=settings)
    assert stats["total"] == 2


def test_creates_posts_with_category_and_alias(blog_dir: Path, settings: Settings) -> None:
    client = FakeClient()
    articles = discover_articles(blog_dir, SYSTEMS, SKIP)
    stats = migrate_articles(articles, client, settings=settings)  # type: ignore[arg-type]
    assert stats["success"] == 4
    assert stats["skipped"] == 1

    by_slug = {payload["data"]["slug"]: payload["data"] for payload in client.created}
    assert by_slug["ce-este-rca"]["category"] == "doc-rca"
    assert by_slug["ce-este-rca"]["title"] == "Ce este asigurarea RCA"
    assert by_slug["malpraxis-medical"]["system"] == "malpraxis"
    assert by_slug["malpraxis-medical"]["category"] == "doc-malpraxis"
    assert "category" not in by_slug["contact"]


def test_existing_posts_skipped_unless_update(blog_dir: Path, settings: Settings) -> None:
    articles = discover_articles(blog_dir, SYSTEMS, SKIP, system_filter="home")

    client = FakeClient(existing={"locuinta": "doc-42"})
    stats = migrate_articles(articles, client, settings=settings)  # type: ignore[arg-type]
    assert stats["skipped"] == 1
    assert client.created == [] and client.updated == []

    client = FakeClient(existing={"locuinta": "doc-42"})
    stats = migrate_articles(
        articles, client, update_existing=True, settings=settings  # type: ignore[arg-type]
    )
    assert stats["success"] == 1
    assert client.updated[0][0] == "doc-42"


def test_failures_are_recorded_and_migration_continues(
    blog_dir: Path, settings: Settings
) -> None:
    client = FakeClient(fail_on="ce-este-rca")
    articles = discover_articles(blog_dir, SYSTEMS, SKIP)
    stats = migrate_articles(articles, client, settings=settings)  # type: ignore[arg-type]
    assert stats["failed"] == 1
    assert stats["errors"] == [{"article": "rca/ce-este-rca", "error": "slug must be unique"}]
    assert stats["success"] == 3
