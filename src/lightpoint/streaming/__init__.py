"""Streaming letter generation over server-sent events."""

from __future__ import annotations

from lightpoint.streaming.gateway import ProgressStreamingGateway
from lightpoint.streaming.sse import (
    SSE_HEADERS,
    SSE_MEDIA_TYPE,
    complete_event,
    error_event,
    format_sse,
    progress_event,
)

__all__ = [
    "SSE_HEADERS",
    "SSE_MEDIA_TYPE",
    "ProgressStreamingGateway",
    "complete_event",
    "error_event",
    "format_sse",
    "progress_event",
]
