"""Build Strapi blog-post payloads from parsed articles."""

from __future__ import annotations

import math
from typing import Any, Dict, Sequence

from blogmigrator.config import Settings, get_settings
from blogmigrator.services.twig.blocks import blocks_to_dicts, count_words
from blogmigrator.services.twig.cleaner import plain_text
from blogmigrator.services.twig.models import Block, ParsedArticle


def build_excerpt(article: ParsedArticle, max_chars: int, separator: str = "|") -> str:
    if article.intro_text:
        excerpt = plain_text(article.intro_text, separator)
        if len(excerpt) > max_chars:
            excerpt = excerpt[:max_chars] + "..."
        return excerpt
    return article.title


def reading_time(blocks: Sequence[Block], words_per_minute: int) -> int:
    return max(1, math.ceil(count_words(blocks) / words_per_minute))


def build_post_payload(
    article: ParsedArticle,
    blocks: Sequence[Block],
    *,
    category: str,
    slug: str,
    category_id: str | None = None,
    settings: Settings | None = None,
) -> Dict[str, Any]:
    """Return the ``{"data": {...}}`` body for creating or updating a blog post."""
    settings = settings or get_settings()
    excerpt = build_excerpt(article, settings.excerpt_max_chars, settings.paragraph_separator)
    meta_title = article.meta_title or article.title or slug
    meta_description = article.meta_description or excerpt

    data: Dict[str, Any] = {
        "title": article.title or slug,
        "slug": slug,
        "excerpt": excerpt or slug,
        "content": blocks_to_dicts(blocks),
        "system": settings.system_aliases.get(category, category),
        "metaTitle": meta_title[: settings.meta_title_max_chars],
        "metaDescription": meta_description[: settings.meta_description_max_chars],
        "tocItems": [item.to_dict() for item in article.toc_items],
        "readingTime": reading_time(blocks, settings.words_per_minute),
        "reviewStatus": settings.review_status,
        "authorName": settings.author_name,
        "featuredImageAlt": article.image_alt,
    }
    if category_id:
        data["category"] = category_id
    return {"data": data}
