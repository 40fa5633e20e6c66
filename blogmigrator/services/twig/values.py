"""Keyed string value extraction from Twig hash text."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Pattern

STRING_BODY = r"((?:[^'\\]|\\.)*)"
STRING_LITERAL = re.compile(rf"'{STRING_BODY}'", re.DOTALL)


def unescape(raw: str) -> str:
    """Turn escaped quotes and escaped newline markers into literal characters."""
    return raw.replace("\\'", "'").replace("\\n", "\n")


@lru_cache(maxsize=64)
def _key_pattern(key: str) -> Pattern[str]:
    return re.compile(rf"'{re.escape(key)}'\s*:\s*'{STRING_BODY}'", re.DOTALL)


@lru_cache(maxsize=64)
def _asset_pattern(key: str) -> Pattern[str]:
    return re.compile(
        rf"'{re.escape(key)}'\s*:\s*(?:asset\(\s*)?'{STRING_BODY}'", re.DOTALL
    )


def extract_string_value(text: str, key: str) -> str:
    """Return the unescaped value of the first ``'key': '...'`` pair, or ''."""
    match = _key_pattern(key).search(text)
    if not match:
        return ""
    return unescape(match.group(1))


def extract_asset_path(text: str, key: str) -> str:
    """Return the path of ``'key': asset('...')`` (or a plain string value), or ''."""
    match = _asset_pattern(key).search(text)
    if not match:
        return ""
    return unescape(match.group(1))


def extract_flag(text: str, key: str) -> bool:
    return re.search(rf"'{re.escape(key)}'\s*:\s*true\b", text) is not None


def string_literals(text: str) -> List[str]:
    """Return every single-quoted string literal in text, unescaped, in order."""
    return [unescape(match.group(1)) for match in STRING_LITERAL.finditer(text)]
