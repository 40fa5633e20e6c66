"""Inline HTML (links, bold, italic) to styled text runs."""

from __future__ import annotations

import re
from typing import List, Tuple

from blogmigrator.services.twig.models import TextRun

INLINE_SPLIT = re.compile(
    r"(<a\s[^>]*>.*?</a>|<strong>.*?</strong>|<b>.*?</b>|<em>.*?</em>|<i>.*?</i>)",
    re.DOTALL | re.IGNORECASE,
)
LINK = re.compile(r"<a\s[^>]*>(.*?)</a>", re.DOTALL | re.IGNORECASE)
BOLD = re.compile(r"<(?:strong|b)>(.*?)</(?:strong|b)>", re.DOTALL | re.IGNORECASE)
ITALIC = re.compile(r"<(?:em|i)>(.*?)</(?:em|i)>", re.DOTALL | re.IGNORECASE)
EMPHASIS_TAG = re.compile(r"</?(?:strong|b|em|i)>", re.IGNORECASE)
BOLD_OPEN = re.compile(r"<(?:strong|b)>", re.IGNORECASE)


def _part_run(part: str) -> TextRun | None:
    link = LINK.fullmatch(part)
    if link:
        # link targets are dropped; only the visible text survives
        inner = link.group(1)
        text = EMPHASIS_TAG.sub("", inner).strip()
        return TextRun(text=text, bold=BOLD_OPEN.search(inner) is not None)

    bold = BOLD.fullmatch(part)
    if bold:
        return TextRun(text=bold.group(1), bold=True)

    italic = ITALIC.fullmatch(part)
    if italic:
        return TextRun(text=italic.group(1), italic=True)

    if part.strip():
        return TextRun(text=part)
    return None


def to_runs(fragment: str) -> Tuple[TextRun, ...]:
    """Convert an inline-markup fragment into text runs without losing text."""
    runs: List[TextRun] = []
    gap = ""
    for part in INLINE_SPLIT.split(fragment):
        if not part:
            continue
        run = _part_run(part)
        if run is None:
            gap += part
            continue
        # whitespace between two runs separates words
        if gap and runs:
            runs.append(TextRun(text=gap))
        gap = ""
        runs.append(run)
    if not runs:
        runs.append(TextRun(text=fragment))
    return tuple(runs)
