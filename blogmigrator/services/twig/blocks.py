"""Fold a parsed article into an ordered sequence of rich-text blocks."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Literal, Sequence, Tuple

from blogmigrator.services.twig.inline import to_runs
from blogmigrator.services.twig.models import (
    Block,
    ContentList,
    HeadingBlock,
    ListBlock,
    ParagraphBlock,
    ParsedArticle,
    TextRun,
)

DEFAULT_SEPARATOR = "|"
DEFAULT_FALLBACK_MAX_CHARS = 2000


def paragraphs(text: str, separator: str = DEFAULT_SEPARATOR) -> List[str]:
    """Split a paragraph-segmented value, dropping blank segments."""
    return [segment.strip() for segment in text.split(separator) if segment.strip()]


def _paragraph_blocks(text: str, separator: str) -> Iterator[Block]:
    for segment in paragraphs(text, separator):
        yield ParagraphBlock(runs=to_runs(segment))


def _heading(text: str, level: Literal[2, 3]) -> Iterator[Block]:
    if text:
        yield HeadingBlock(level=level, runs=(TextRun(text=text),))


def _list_blocks(lists: Iterable[ContentList]) -> Iterator[Block]:
    for content_list in lists:
        if content_list.title:
            yield ParagraphBlock(runs=(TextRun(text=content_list.title, bold=True),))
        yield ListBlock(
            ordered=content_list.ordered,
            items=tuple(to_runs(item) for item in content_list.items),
        )


def _article_blocks(article: ParsedArticle, separator: str) -> Iterator[Block]:
    yield from _paragraph_blocks(article.intro_text, separator)
    for section in article.content_sections:
        yield from _heading(section.heading, 2)
        yield from _paragraph_blocks(section.content, separator)
        yield from _list_blocks(section.lists)
        yield from _paragraph_blocks(section.additional_content, separator)
        for sub in section.subsections:
            yield from _heading(sub.subheading, 3)
            yield from _paragraph_blocks(sub.content, separator)
            yield from _list_blocks(sub.lists)
            yield from _paragraph_blocks(sub.additional_content, separator)
    yield from _paragraph_blocks(article.conclusion, separator)


def build_blocks(
    article: ParsedArticle,
    *,
    separator: str = DEFAULT_SEPARATOR,
    raw_fallback_max_chars: int = DEFAULT_FALLBACK_MAX_CHARS,
) -> Tuple[Block, ...]:
    """Return the article's blocks in reading order.

    When nothing structured was extracted, the raw fallback text becomes a
    single bounded paragraph.
    """
    blocks = tuple(_article_blocks(article, separator))
    if not blocks and article.raw_html:
        text = article.raw_html[:raw_fallback_max_chars]
        return (ParagraphBlock(runs=(TextRun(text=text),)),)
    return blocks


def blocks_to_dicts(blocks: Sequence[Block]) -> List[Dict[str, Any]]:
    return [block.to_dict() for block in blocks]


def _block_runs(block: Block) -> Iterator[TextRun]:
    if isinstance(block, ListBlock):
        for item in block.items:
            yield from item
    else:
        yield from block.runs


def count_words(blocks: Sequence[Block]) -> int:
    """Count whitespace-separated words across all runs, list items included."""
    return sum(len(run.text.split()) for block in blocks for run in _block_runs(block))
