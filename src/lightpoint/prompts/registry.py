"""Prompt registry: backend routing for prompt templates.

Usage::

    prompt = get_prompt("complaint", "letter", "STAGE1_SYSTEM")

    # Tests or deployments can swap the backend:
    configure(backend=MyBackend())
"""

from __future__ import annotations

import logging

from lightpoint.prompts.backends.file_backend import FilePromptBackend
from lightpoint.prompts.backends.protocol import IPromptBackend

logger = logging.getLogger(__name__)

# ── Module-level state ──────────────────────────────────────────────

_primary_backend: IPromptBackend | None = None
_fallback_backend: IPromptBackend | None = None


# ── Public API ──────────────────────────────────────────────────────


def configure(*, backend: IPromptBackend | None = None, fallback_to_file: bool = True) -> None:
    """Install the prompt backend.

    With no ``backend`` the file backend is used. When a custom backend is
    given and ``fallback_to_file`` is set, misses fall through to the
    bundled templates.
    """
    global _primary_backend, _fallback_backend

    if backend is None:
        _primary_backend = FilePromptBackend()
        _fallback_backend = None
    else:
        _primary_backend = backend
        _fallback_backend = FilePromptBackend() if fallback_to_file else None


def get_prompt(domain: str, category: str, name: str) -> str:
    """Look up a prompt template by domain, category, and name.

    Args:
        domain: Template namespace (``"complaint"``, ``"penalty_appeal"``, ``"knowledge"``).
        category: Template module (e.g. ``"letter"``, ``"chat"``).
        name: Constant name (e.g. ``"STAGE1_SYSTEM"``).

    Raises:
        KeyError: If the prompt is not found in any backend.
    """
    if _primary_backend is None:
        configure()
    assert _primary_backend is not None

    try:
        return _primary_backend.get(domain, category, name)
    except KeyError:
        if _fallback_backend is not None:
            logger.debug("Primary backend miss for %s/%s/%s, trying fallback", domain, category, name)
            return _fallback_backend.get(domain, category, name)
        raise


def reset() -> None:
    """Reset the registry to unconfigured state (for testing)."""
    global _primary_backend, _fallback_backend
    _primary_backend = None
    _fallback_backend = None
