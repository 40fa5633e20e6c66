"""Recursive extraction of content sections, subsections and lists."""

from __future__ import annotations

import re
from typing import List, Tuple

from loguru import logger

from blogmigrator.services.twig.models import ContentList, ImageRef, Section, Subsection
from blogmigrator.services.twig.scanner import (
    MalformedSource,
    find_closing,
    key_span,
    span_body,
    split_top_level,
    top_level_view,
)
from blogmigrator.services.twig.values import (
    extract_asset_path,
    extract_flag,
    extract_string_value,
    string_literals,
)

BOOLEAN_TOKENS = {"true", "false"}
# leftovers of stray commas or quotes, not real items
NEAR_EMPTY_ITEM = re.compile(r"[\s,.;:]*")


def _array_objects(text: str) -> List[str]:
    """Return the top-level objects of the array starting at text[0]."""
    if not text.startswith("["):
        return []
    try:
        end = find_closing(text, 0)
    except MalformedSource as exc:
        logger.debug(f"Skipping malformed array: {exc}")
        return []
    return split_top_level(span_body(text[:end]))


def _list_items(items_span: str) -> Tuple[str, ...]:
    items = [
        value
        for value in string_literals(span_body(items_span))
        if value not in BOOLEAN_TOKENS and not NEAR_EMPTY_ITEM.fullmatch(value)
    ]
    return tuple(items)


def extract_lists(obj: str, view: str | None = None) -> Tuple[ContentList, ...]:
    """Extract ``'lists'`` of an object, falling back to a bare ``'items'`` array."""
    view = top_level_view(obj) if view is None else view
    lists: List[ContentList] = []
    for list_obj in _array_objects(key_span(obj, "lists", "[", view)):
        list_view = top_level_view(list_obj)
        items = _list_items(key_span(list_obj, "items", "[", list_view))
        if not items:
            continue
        lists.append(
            ContentList(
                title=extract_string_value(list_view, "title"),
                ordered=extract_flag(list_view, "ordered"),
                items=items,
            )
        )
    if lists:
        return tuple(lists)

    # legacy shape: 'items': [...] directly on the section
    items = _list_items(key_span(obj, "items", "[", view))
    if items:
        return (ContentList(title="", ordered=False, items=items),)
    return ()


def extract_image(obj: str, view: str | None = None) -> ImageRef | None:
    """Extract ``'image': {'src': asset('...'), 'alt': '...'}`` of an object."""
    image_obj = key_span(obj, "image", "{", view)
    if not image_obj:
        return None
    src = extract_asset_path(image_obj, "src")
    if not src:
        return None
    return ImageRef(src=src, alt=extract_string_value(image_obj, "alt"))


def _subsection(obj: str) -> Subsection:
    view = top_level_view(obj)
    return Subsection(
        subheading=extract_string_value(view, "subheading"),
        content=extract_string_value(view, "content"),
        additional_content=extract_string_value(view, "additional_content"),
        lists=extract_lists(obj, view),
        image=extract_image(obj, view),
    )


def _section(obj: str) -> Section:
    view = top_level_view(obj)
    sub_objects = _array_objects(key_span(obj, "subsections", "[", view))
    subsections = [_subsection(sub) for sub in sub_objects]
    return Section(
        id=extract_string_value(view, "id"),
        heading=extract_string_value(view, "heading"),
        content=extract_string_value(view, "content"),
        additional_content=extract_string_value(view, "additional_content"),
        lists=extract_lists(obj, view),
        subsections=tuple(sub for sub in subsections if not sub.is_empty()),
        image=extract_image(obj, view),
    )


def extract_sections(array_span: str) -> Tuple[Section, ...]:
    """Extract every section of a ``[ {...}, {...} ]`` span.

    The span may run past the array's closing bracket; the matching bracket is
    located first. A malformed array yields no sections.
    """
    sections = [_section(obj) for obj in _array_objects(array_span.lstrip())]
    return tuple(section for section in sections if not section.is_empty())
