"""Text normalization helpers."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

ZERO_WIDTH_PATTERN = re.compile(r"[\u200b\u200c\u200d\u2060]")
WHITESPACE_PATTERN = re.compile(r"\s+")
SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.!?;:])")
TWIG_EXPRESSION = re.compile(r"\{\{.*?\}\}", re.DOTALL)
TWIG_STATEMENT = re.compile(r"\{%.*?%\}", re.DOTALL)
TWIG_COMMENT = re.compile(r"\{#.*?#\}", re.DOTALL)


def strip_comments(text: str) -> str:
    """Remove ``{# ... #}`` comments from text."""
    return TWIG_COMMENT.sub("", text)


def encodable(text: str) -> str:
    """Return text with lone surrogates replaced by ``?``."""
    return text.encode("utf-8", "replace").decode("utf-8")


def strip_twig(text: str, *, statements: bool = True) -> str:
    """Remove ``{{ ... }}`` expressions, comments (and ``{% ... %}`` tags) from text."""
    cleaned = TWIG_EXPRESSION.sub("", strip_comments(text))
    if statements:
        cleaned = TWIG_STATEMENT.sub("", cleaned)
    return cleaned


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def plain_text(fragment: str, separator: str = "|") -> str:
    """Return fragment as plain text: no paragraph separators, tags or entities."""
    if not fragment:
        return ""
    cleaned = fragment.replace(separator, " ") if separator else fragment
    cleaned = BeautifulSoup(encodable(cleaned), "lxml").get_text()
    cleaned = ZERO_WIDTH_PATTERN.sub("", cleaned)
    cleaned = cleaned.replace("\xa0", " ")
    cleaned = collapse_whitespace(cleaned)
    cleaned = SPACE_BEFORE_PUNCT.sub(r"\1", cleaned)
    return cleaned
