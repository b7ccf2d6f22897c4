"""Server-sent event framing."""

from __future__ import annotations

import json
from typing import Any

from lightpoint.models import StreamEvent

SSE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

SSE_MEDIA_TYPE = "text/event-stream"


def format_sse(event: StreamEvent) -> str:
    """``event: <name>\\ndata: <json>\\n\\n``"""
    return f"event: {event.event}\ndata: {json.dumps(event.data, default=str)}\n\n"


def progress_event(stage: str, percent: int, message: str) -> StreamEvent:
    return StreamEvent(event="progress", data={"stage": stage, "percent": percent, "message": message})


def complete_event(letter: str, **extra: Any) -> StreamEvent:
    return StreamEvent(event="complete", data={"letter": letter, **extra})


def error_event(message: str, stage: str | None = None) -> StreamEvent:
    data: dict[str, Any] = {"message": message}
    if stage is not None:
        data["stage"] = stage
    return StreamEvent(event="error", data=data)
