"""File-based prompt backend.

Each template module stores its prompts in a ``_PROMPT_DATA`` dict. This
backend reads that dict directly rather than going through the module's
``__getattr__``, which itself delegates back to ``get_prompt()``.
"""

from __future__ import annotations

import importlib
from types import ModuleType


class FilePromptBackend:
    """Loads prompts from ``lightpoint.prompts.templates.{domain}.{category}``."""

    def __init__(self) -> None:
        self._modules: dict[tuple[str, str], ModuleType] = {}

    def get(self, domain: str, category: str, name: str) -> str:
        key = (domain, category)
        if key not in self._modules:
            module_path = f"lightpoint.prompts.templates.{domain}.{category}"
            try:
                self._modules[key] = importlib.import_module(module_path)
            except ModuleNotFoundError as exc:
                raise KeyError(f"Prompt module not found: {module_path}") from exc

        data: dict[str, str] | None = getattr(self._modules[key], "_PROMPT_DATA", None)
        if data is not None and name in data:
            return data[name]

        raise KeyError(f"Prompt {name!r} not found in {domain}/{category}")
