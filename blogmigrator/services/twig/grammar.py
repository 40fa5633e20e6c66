"""Grammar detection and article extraction for blog Twig templates.

Two template shapes carry article data:

* ``{% set article_data = { 'title': ..., 'content_sections': [...] } %}`` -
  a hash addressed by key (rca, casco, travel, life, rcp ...).
* ``{{ blog_macros.blog_content(title, asset(image), image_alt, intro,
  sections, toc, conclusion) }}`` - a macro call with positional arguments
  (common, home, health, accidents, breakdown, cmr).

Anything else goes through the raw fallback, which keeps the
``workarea_content`` block with Twig directives removed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from bs4 import BeautifulSoup
from loguru import logger

from blogmigrator.services.twig.blocks import DEFAULT_FALLBACK_MAX_CHARS
from blogmigrator.services.twig.cleaner import (
    collapse_whitespace,
    encodable,
    strip_comments,
    strip_twig,
)
from blogmigrator.services.twig.models import ArticleSource, Grammar, ParsedArticle
from blogmigrator.services.twig.scanner import (
    MalformedSource,
    Token,
    find_closing,
    iter_top_level,
    key_span,
    top_level_view,
)
from blogmigrator.services.twig.sections import extract_sections
from blogmigrator.services.twig.toc import extract_toc
from blogmigrator.services.twig.values import (
    extract_asset_path,
    extract_string_value,
    unescape,
)

NAMED_OBJECT_MARKER = re.compile(r"\{%-?\s*set\s+article_data\s*=\s*\{")
POSITIONAL_CALL_MARKER = "blog_macros.blog_content("
TITLE_BLOCK = re.compile(r"\{%-?\s*block\s+title\s*-?%\}(.*?)\{%-?\s*endblock", re.DOTALL)
WORKAREA_BLOCK = re.compile(
    r"\{%-?\s*block\s+workarea_content\s*-?%\}(.*?)\{%-?\s*endblock", re.DOTALL
)

# Positional macro arguments are addressed by counting top-level literals.
# A `null` argument produces no literal and shifts every later string field.
POSITIONAL_STRINGS = {
    "title": 0,
    "image_path": 1,  # the path inside asset('...')
    "image_alt": 2,
    "intro_text": 3,
    "conclusion": 4,
}
POSITIONAL_ARRAYS = {
    "content_sections": 0,
    "toc_items": 1,
}


@dataclass(frozen=True)
class PositionalArgs:
    strings: Tuple[str, ...]
    arrays: Tuple[Token, ...]

    @classmethod
    def from_text(cls, args: str) -> "PositionalArgs":
        tokens = list(iter_top_level(args))
        return cls(
            strings=tuple(unescape(tok.text) for tok in tokens if tok.kind == "string"),
            arrays=tuple(tok for tok in tokens if tok.kind == "array"),
        )

    def string(self, field: str) -> str:
        index = POSITIONAL_STRINGS[field]
        return self.strings[index] if index < len(self.strings) else ""

    def array(self, field: str) -> Token | None:
        index = POSITIONAL_ARRAYS[field]
        return self.arrays[index] if index < len(self.arrays) else None


def detect_grammar(text: str) -> Grammar:
    if NAMED_OBJECT_MARKER.search(text):
        return Grammar.NAMED_OBJECT
    if POSITIONAL_CALL_MARKER in text:
        return Grammar.POSITIONAL_CALL
    return Grammar.RAW


def extract_meta_title(text: str) -> str:
    match = TITLE_BLOCK.search(text)
    if not match:
        return ""
    return collapse_whitespace(strip_twig(match.group(1), statements=False))


def extract_meta_description(text: str) -> str:
    if "description" not in text:
        return ""
    soup = BeautifulSoup(encodable(text), "lxml")
    tag = soup.find("meta", attrs={"name": "description"})
    if tag is None:
        return ""
    return collapse_whitespace(strip_twig(str(tag.get("content", "") or "")))


def _balanced_or_rest(text: str, open_index: int, what: str) -> Tuple[str, bool]:
    """Return the balanced span at open_index, or the rest of text if unclosed."""
    try:
        end = find_closing(text, open_index)
    except MalformedSource as exc:
        logger.warning(f"{what} is not closed, parsing partial text: {exc}")
        return text[open_index:], False
    return text[open_index:end], True


def _parse_named_object(text: str, marker: re.Match[str]) -> Dict[str, Any]:
    obj, _ = _balanced_or_rest(text, marker.end() - 1, "article_data hash")
    view = top_level_view(obj)
    sections_span = key_span(obj, "content_sections", "[", view)
    toc_span = key_span(obj, "toc_items", "[", view) or obj
    return {
        "title": extract_string_value(view, "title"),
        "image_path": extract_asset_path(view, "image"),
        "image_alt": extract_string_value(view, "image_alt"),
        "intro_text": extract_string_value(view, "intro_text"),
        "conclusion": extract_string_value(view, "conclusion"),
        "content_sections": extract_sections(sections_span) if sections_span else (),
        "toc_items": extract_toc(toc_span, text),
    }


def _parse_positional_call(text: str) -> Dict[str, Any]:
    paren = text.index(POSITIONAL_CALL_MARKER) + len(POSITIONAL_CALL_MARKER) - 1
    call, closed = _balanced_or_rest(text, paren, "blog_content call")
    args_text = call[1:-1] if closed else call[1:]
    args = PositionalArgs.from_text(args_text)

    sections = args.array("content_sections")
    toc_span = args_text[sections.end :] if sections is not None else args_text
    return {
        "title": args.string("title"),
        "image_path": args.string("image_path"),
        "image_alt": args.string("image_alt"),
        "intro_text": args.string("intro_text"),
        "conclusion": args.string("conclusion"),
        "content_sections": extract_sections(sections.text) if sections is not None else (),
        "toc_items": extract_toc(toc_span, text),
    }


def _parse_raw(text: str, max_chars: int) -> Dict[str, Any]:
    match = WORKAREA_BLOCK.search(text)
    if not match:
        return {}
    return {"raw_html": strip_twig(match.group(1)).strip()[:max_chars]}


def parse_article(
    source: ArticleSource, *, raw_fallback_max_chars: int = DEFAULT_FALLBACK_MAX_CHARS
) -> ParsedArticle:
    """Extract the article structure of one template.

    Never raises on malformed input: unbalanced regions leave the affected
    fields empty, and unrecognized templates fall back to raw content.
    """
    text = strip_comments(encodable(source.text))
    marker = NAMED_OBJECT_MARKER.search(text)
    if marker is not None:
        grammar = Grammar.NAMED_OBJECT
        fields = _parse_named_object(text, marker)
    elif POSITIONAL_CALL_MARKER in text:
        grammar = Grammar.POSITIONAL_CALL
        fields = _parse_positional_call(text)
    else:
        grammar = Grammar.RAW
        fields = _parse_raw(text, raw_fallback_max_chars)
    logger.debug(f"{source.category}/{source.slug}: grammar={grammar.value}")

    return ParsedArticle(
        grammar=grammar,
        meta_title=extract_meta_title(text),
        meta_description=extract_meta_description(text),
        **fields,
    )
