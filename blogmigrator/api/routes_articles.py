"""Routes for previewing template conversion."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from blogmigrator.config import Settings, get_settings
from blogmigrator.services.twig.blocks import blocks_to_dicts, build_blocks
from blogmigrator.services.twig.grammar import parse_article
from blogmigrator.services.twig.models import ArticleSource

router = APIRouter(prefix="/articles", tags=["articles"])


class ParseRequest(BaseModel):
    category: str = Field(..., min_length=1, max_length=64)
    slug: str = Field(..., min_length=1, max_length=255)
    source: str = Field(..., description="Raw .html.twig template text")


class ParseResponse(BaseModel):
    grammar: str
    article: dict[str, Any]
    blocks: list[dict[str, Any]]


@router.post("/parse", response_model=ParseResponse, status_code=status.HTTP_200_OK)
def parse(
    payload: ParseRequest, settings: Annotated[Settings, Depends(get_settings)]
) -> ParseResponse:
    """Convert one template into its parsed structure and rich-text blocks."""
    if len(payload.source) > settings.max_source_chars:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"source exceeds {settings.max_source_chars} characters",
        )
    source = ArticleSource(category=payload.category, slug=payload.slug, text=payload.source)
    article = parse_article(source, raw_fallback_max_chars=settings.raw_fallback_max_chars)
    blocks = build_blocks(
        article,
        separator=settings.paragraph_separator,
        raw_fallback_max_chars=settings.raw_fallback_max_chars,
    )
    return ParseResponse(
        grammar=article.grammar.value,
        article=article.to_dict(),
        blocks=blocks_to_dicts(blocks),
    )
