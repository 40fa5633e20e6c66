"""Parse one Twig template and dump its structure and blocks as JSON."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from blogmigrator.config import get_settings
from blogmigrator.services.migration import TEMPLATE_SUFFIX
from blogmigrator.services.twig.blocks import blocks_to_dicts, build_blocks
from blogmigrator.services.twig.grammar import parse_article
from blogmigrator.services.twig.models import ArticleSource


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview the conversion of one template.")
    parser.add_argument("path", help="Path to a .html.twig article")
    parser.add_argument("--category", default=None, help="Defaults to the parent directory name.")
    parser.add_argument("--out", default=None, help="Write JSON here instead of stdout.")
    return parser.parse_args(argv)


def preview(path: Path, category: str | None = None) -> dict:
    settings = get_settings()
    slug = path.name[: -len(TEMPLATE_SUFFIX)] if path.name.endswith(TEMPLATE_SUFFIX) else path.stem
    source = ArticleSource(
        category=category or path.parent.name,
        slug=slug,
        text=path.read_text(encoding="utf-8"),
    )
    article = parse_article(source, raw_fallback_max_chars=settings.raw_fallback_max_chars)
    blocks = build_blocks(
        article,
        separator=settings.paragraph_separator,
        raw_fallback_max_chars=settings.raw_fallback_max_chars,
    )
    return {
        "category": source.category,
        "slug": source.slug,
        "article": article.to_dict(),
        "blocks": blocks_to_dicts(blocks),
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    result = preview(Path(args.path), args.category)
    body = json.dumps(result, ensure_ascii=False, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(body, encoding="utf-8")
        print(f"[preview] saved to {out_path}")
    else:
        print(body)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
