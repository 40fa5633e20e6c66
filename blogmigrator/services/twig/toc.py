"""Table-of-contents extraction with a fixed fallback cascade."""

from __future__ import annotations

import re
from typing import Tuple

from blogmigrator.services.twig.models import TocItem
from blogmigrator.services.twig.values import STRING_BODY, unescape

ANCHOR_MARKER = "#"

TITLE_HREF = re.compile(
    rf"\{{\s*'title'\s*:\s*'{STRING_BODY}'\s*,\s*'href'\s*:\s*'{STRING_BODY}'\s*,?\s*\}}",
    re.DOTALL,
)
HREF_TITLE = re.compile(
    rf"\{{\s*'href'\s*:\s*'{STRING_BODY}'\s*,\s*'title'\s*:\s*'{STRING_BODY}'\s*,?\s*\}}",
    re.DOTALL,
)


def _title_first(text: str) -> Tuple[TocItem, ...]:
    return tuple(
        TocItem(href=unescape(m.group(2)), title=unescape(m.group(1)))
        for m in TITLE_HREF.finditer(text)
    )


def _href_first(text: str) -> Tuple[TocItem, ...]:
    return tuple(
        TocItem(href=unescape(m.group(1)), title=unescape(m.group(2)))
        for m in HREF_TITLE.finditer(text)
    )


def extract_toc(span: str, whole_source: str) -> Tuple[TocItem, ...]:
    """Return TOC items from span; the first strategy with matches wins.

    Order: ``{title, href}`` in span, ``{href, title}`` in span, then
    ``{title, href}`` anywhere in whole_source with an in-page anchor href.
    Entries are not checked against the extracted section headings.
    """
    items = _title_first(span)
    if items:
        return items
    items = _href_first(span)
    if items:
        return items
    return tuple(
        item for item in _title_first(whole_source) if item.href.startswith(ANCHOR_MARKER)
    )
