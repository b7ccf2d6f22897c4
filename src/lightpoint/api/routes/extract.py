"""Deterministic content extraction and layout endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from lightpoint.api.deps import get_image_generator, get_settings
from lightpoint.core.config import AppSettings
from lightpoint.extraction import PatternExtractor
from lightpoint.layout import LayoutMapper
from lightpoint.models import ExtractionResult, Layout, LayoutOptions
from lightpoint.providers import ImageGenerator

router = APIRouter(tags=["extraction"])


class ExtractRequest(BaseModel):
    text: str = ""


class LayoutRequest(BaseModel):
    """Text to lay out. ``options.source_text`` defaults to ``text``."""

    text: str = ""
    options: LayoutOptions = Field(default_factory=LayoutOptions)


@router.post("/extract", response_model=ExtractionResult)
async def extract(
    request: ExtractRequest,
    settings: AppSettings = Depends(get_settings),
) -> ExtractionResult:
    return PatternExtractor(settings.extraction).extract(request.text)


@router.post("/layout", response_model=Layout)
async def layout(
    request: LayoutRequest,
    settings: AppSettings = Depends(get_settings),
    images: ImageGenerator = Depends(get_image_generator),
) -> Layout:
    """Extract entities from ``text`` and map them to layout components."""
    extraction = PatternExtractor(settings.extraction).extract(request.text)
    options = request.options
    if not options.source_text:
        options = options.model_copy(update={"source_text": request.text})
    mapper = LayoutMapper(settings.layout, image_generator=images)
    return await mapper.map_to_layout(extraction, options)
