"""Case classification endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from lightpoint.api.deps import get_settings
from lightpoint.classification import CaseClassifier, combine_documents
from lightpoint.core.config import AppSettings
from lightpoint.models import CaseType, Classification, DocumentAnalysis

router = APIRouter(tags=["classification"])


class ClassifyRequest(BaseModel):
    """Narrative plus optional raw document texts or per-document analyses."""

    narrative: str = ""
    documents: list[str] = Field(default_factory=list)
    document_analyses: list[DocumentAnalysis] = Field(default_factory=list)


class OverrideRequest(BaseModel):
    classification: Classification
    new_type: CaseType


@router.post("/classify", response_model=Classification)
async def classify(
    request: ClassifyRequest,
    settings: AppSettings = Depends(get_settings),
) -> Classification:
    narrative = request.narrative
    if request.document_analyses:
        narrative = combine_documents(request.document_analyses, request.narrative)
    return CaseClassifier(settings.classification).classify(narrative, request.documents)


@router.post("/classify/override", response_model=Classification)
async def override(
    request: OverrideRequest,
    settings: AppSettings = Depends(get_settings),
) -> Classification:
    return CaseClassifier(settings.classification).override(request.classification, request.new_type)
