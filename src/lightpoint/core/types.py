"""Shared type aliases for the framework layer."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

# JSON-like dict returned by LLM parsing
JsonDict = dict[str, Any]
JsonList = list[dict[str, Any]]


class ProgressCallback(Protocol):
    """``(stage, percent, message)`` progress sink used by the letter pipeline."""

    def __call__(self, stage: str, percent: int, message: str) -> None: ...


# Probe polled between stages to detect a departed subscriber
DisconnectProbe = Callable[[], Awaitable[bool]]
