"""Prompt management: registry and per-pipeline templates."""

from __future__ import annotations

from lightpoint.prompts.registry import configure, get_prompt, reset

__all__ = ["configure", "get_prompt", "reset"]
