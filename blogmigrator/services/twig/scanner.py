"""Quote-aware delimiter scanning over Twig object literals.

Twig hashes in the blog templates are written with single-quoted strings only,
so a single quote is the only string delimiter tracked here. A quote preceded
by an odd run of backslashes is part of the string, not its end.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Literal

PAIRS = {"{": "}", "[": "]", "(": ")"}
QUOTE = "'"


class MalformedSource(ValueError):
    """Raised when an opening delimiter or quote has no matching close."""


def is_escaped(text: str, pos: int) -> bool:
    count = 0
    idx = pos - 1
    while idx >= 0 and text[idx] == "\\":
        count += 1
        idx -= 1
    return count % 2 == 1


def string_end(text: str, start: int) -> int:
    """Return the index one past the quote closing the string opened at start."""
    pos = text.find(QUOTE, start + 1)
    while pos != -1:
        if not is_escaped(text, pos):
            return pos + 1
        pos = text.find(QUOTE, pos + 1)
    raise MalformedSource(f"unterminated string opened at {start}")


def find_closing(text: str, open_index: int, *, quote_aware: bool = True) -> int:
    """Return the index one past the delimiter matching text[open_index].

    Only the same delimiter pair counts towards nesting. The scan never looks
    past the end of text, so it always terminates.
    """
    if not 0 <= open_index < len(text) or text[open_index] not in PAIRS:
        raise MalformedSource(f"no opening delimiter at {open_index}")
    opener = text[open_index]
    closer = PAIRS[opener]
    depth = 0
    in_string = False
    for pos in range(open_index, len(text)):
        char = text[pos]
        if quote_aware and char == QUOTE and not is_escaped(text, pos):
            in_string = not in_string
        elif in_string:
            continue
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return pos + 1
    raise MalformedSource(f"unbalanced {opener!r} opened at {open_index}")


def split_top_level(body: str, pair: str = "{}", *, quote_aware: bool = True) -> List[str]:
    """Split body into its top-level balanced spans for the given delimiter pair.

    Spans are recorded on depth 0 -> 1 -> 0 transitions only, so objects nested
    inside a span stay part of it. A trailing unterminated span is dropped.
    """
    opener, closer = pair[0], pair[1]
    spans: List[str] = []
    depth = 0
    start = -1
    in_string = False
    for pos, char in enumerate(body):
        if quote_aware and char == QUOTE and not is_escaped(body, pos):
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == opener:
            if depth == 0:
                start = pos
            depth += 1
        elif char == closer and depth > 0:
            depth -= 1
            if depth == 0:
                spans.append(body[start : pos + 1])
    return spans


@dataclass(frozen=True)
class Token:
    kind: Literal["string", "array", "object"]
    start: int
    end: int
    text: str  # raw inner value for strings, full span for arrays/objects


def iter_top_level(text: str, start: int = 0) -> Iterator[Token]:
    """Yield the string literals, arrays and objects sitting at the top level of text.

    Parentheses are transparent: the path inside ``asset('...')`` is reported
    as a top-level string. Iteration stops at the first unterminated token.
    """
    pos = start
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == QUOTE:
            try:
                end = string_end(text, pos)
            except MalformedSource:
                return
            yield Token("string", pos, end, text[pos + 1 : end - 1])
            pos = end
        elif char in "[{":
            try:
                end = find_closing(text, pos)
            except MalformedSource:
                return
            yield Token("array" if char == "[" else "object", pos, end, text[pos:end])
            pos = end
        else:
            pos += 1


def top_level_view(obj: str) -> str:
    """Return obj with every nested array/object blanked out, indices preserved."""
    chars = list(obj)
    pos = 1 if obj.startswith("{") else 0
    length = len(obj)
    while pos < length:
        char = obj[pos]
        if char == QUOTE:
            try:
                pos = string_end(obj, pos)
            except MalformedSource:
                break
        elif char in "[{":
            try:
                end = find_closing(obj, pos)
            except MalformedSource:
                end = length
            chars[pos:end] = [" "] * (end - pos)
            pos = end
        else:
            pos += 1
    return "".join(chars)


def key_span(obj: str, key: str, opener: str = "[", view: str | None = None) -> str:
    """Return the balanced span bound to a top-level ``'key':`` in obj, or ''."""
    view = top_level_view(obj) if view is None else view
    # the value itself is blanked in view; step over whitespace in obj
    match = re.search(rf"'{re.escape(key)}'\s*:", view)
    if not match:
        return ""
    pos = match.end()
    while pos < len(obj) and obj[pos].isspace():
        pos += 1
    if pos >= len(obj) or obj[pos] != opener:
        return ""
    try:
        end = find_closing(obj, pos)
    except MalformedSource:
        return ""
    return obj[pos:end]


def span_body(span: str) -> str:
    """Strip the outer delimiters of a balanced span."""
    return span[1:-1] if len(span) >= 2 else ""
