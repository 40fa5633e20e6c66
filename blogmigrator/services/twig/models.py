"""Typed models for parsed Twig articles and rich-text blocks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Literal, Tuple, Union


class Grammar(str, Enum):
    """Extraction strategy selected for a template."""

    NAMED_OBJECT = "named_object"
    POSITIONAL_CALL = "positional_call"
    RAW = "raw"


@dataclass(frozen=True)
class ArticleSource:
    category: str
    slug: str
    text: str


@dataclass(frozen=True)
class TocItem:
    href: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return {"href": self.href, "title": self.title}


@dataclass(frozen=True)
class ImageRef:
    src: str
    alt: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"src": self.src, "alt": self.alt}


@dataclass(frozen=True)
class ContentList:
    title: str
    ordered: bool
    items: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "ordered": self.ordered, "items": list(self.items)}


@dataclass(frozen=True)
class Subsection:
    subheading: str = ""
    content: str = ""
    additional_content: str = ""
    lists: Tuple[ContentList, ...] = ()
    image: ImageRef | None = None

    def is_empty(self) -> bool:
        return not (
            self.subheading
            or self.content
            or self.additional_content
            or self.lists
            or self.image
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subheading": self.subheading,
            "content": self.content,
            "additionalContent": self.additional_content,
            "lists": [item.to_dict() for item in self.lists],
            "image": self.image.to_dict() if self.image else None,
        }


@dataclass(frozen=True)
class Section:
    id: str = ""
    heading: str = ""
    content: str = ""
    additional_content: str = ""
    lists: Tuple[ContentList, ...] = ()
    subsections: Tuple[Subsection, ...] = ()
    image: ImageRef | None = None

    def is_empty(self) -> bool:
        return not (
            self.id
            or self.heading
            or self.content
            or self.additional_content
            or self.lists
            or self.subsections
            or self.image
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "heading": self.heading,
            "content": self.content,
            "additionalContent": self.additional_content,
            "lists": [item.to_dict() for item in self.lists],
            "subsections": [sub.to_dict() for sub in self.subsections],
            "image": self.image.to_dict() if self.image else None,
        }


@dataclass(frozen=True)
class ParsedArticle:
    """Article intermediate representation extracted from one template."""

    grammar: Grammar
    title: str = ""
    meta_title: str = ""
    meta_description: str = ""
    image_path: str = ""
    image_alt: str = ""
    intro_text: str = ""
    toc_items: Tuple[TocItem, ...] = ()
    content_sections: Tuple[Section, ...] = ()
    conclusion: str = ""
    raw_html: str = ""

    @property
    def has_content(self) -> bool:
        """Return True if there is anything worth migrating."""
        return bool(self.title or self.intro_text or self.raw_html)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grammar": self.grammar.value,
            "title": self.title,
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
            "imagePath": self.image_path,
            "imageAlt": self.image_alt,
            "introText": self.intro_text,
            "tocItems": [item.to_dict() for item in self.toc_items],
            "contentSections": [section.to_dict() for section in self.content_sections],
            "conclusion": self.conclusion,
            "rawHtml": self.raw_html,
        }


@dataclass(frozen=True)
class TextRun:
    text: str
    bold: bool = False
    italic: bool = False

    def to_dict(self) -> Dict[str, Any]:
        node: Dict[str, Any] = {"type": "text", "text": self.text}
        if self.bold:
            node["bold"] = True
        if self.italic:
            node["italic"] = True
        return node


@dataclass(frozen=True)
class HeadingBlock:
    level: Literal[2, 3]
    runs: Tuple[TextRun, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "heading",
            "level": self.level,
            "children": [run.to_dict() for run in self.runs],
        }


@dataclass(frozen=True)
class ParagraphBlock:
    runs: Tuple[TextRun, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "paragraph", "children": [run.to_dict() for run in self.runs]}


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items: Tuple[Tuple[TextRun, ...], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "list",
            "format": "ordered" if self.ordered else "unordered",
            "children": [
                {"type": "list-item", "children": [run.to_dict() for run in item]}
                for item in self.items
            ],
        }


Block = Union[HeadingBlock, ParagraphBlock, ListBlock]
