"""Streaming letter generation endpoint (server-sent events)."""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from lightpoint.api.deps import get_completer, get_settings
from lightpoint.core.config import AppSettings
from lightpoint.letters import ThreeStageLetterGenerator
from lightpoint.models import LetterRequest
from lightpoint.providers import Completer
from lightpoint.streaming import SSE_HEADERS, SSE_MEDIA_TYPE, ProgressStreamingGateway, format_sse

log = logging.getLogger(__name__)

router = APIRouter(tags=["letters"])


@router.post("/letters/generate-stream")
async def generate_stream(
    body: LetterRequest,
    request: Request,
    settings: AppSettings = Depends(get_settings),
    client: Completer = Depends(get_completer),
) -> StreamingResponse:
    """Generate a letter, streaming ``progress`` events and one terminal event.

    Validation failures are reported in-band as an ``error`` event so the
    client sees a single protocol.
    """
    gateway = ProgressStreamingGateway(
        lambda: ThreeStageLetterGenerator(client, settings.letter),
        settings.letter,
    )

    async def event_stream() -> AsyncIterator[str]:
        async for event in gateway.stream(body, request.is_disconnected):
            yield format_sse(event)

    log.info("Streaming %s letter for %s", body.resolved_pipeline(), body.metadata.case_reference or "<missing>")
    return StreamingResponse(event_stream(), media_type=SSE_MEDIA_TYPE, headers=SSE_HEADERS)
