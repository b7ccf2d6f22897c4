"""Image generation through an image-capable chat model.

OpenRouter-style image models answer a chat completion with
``modalities=["image", "text"]`` and return the picture either in
``message.images[0].image_url.url`` (usually a base64 data URL) or inline in
the text content.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from lightpoint.core.config import LLMConfig
from lightpoint.exceptions import ImageGenerationError

log = logging.getLogger(__name__)

_MARKDOWN_IMAGE = re.compile(r"!\[[^\]]*\]\(([^)\s]+)\)")


def build_image_prompt(title: str, heading: str = "", content: str = "") -> str:
    """Prompt for a 16:9 illustration of one article section."""
    prompt = (
        "Generate a 16:9 aspect ratio image for a professional UK tax advisory blog article.\n"
        f'Article: "{title}"\n'
    )
    if heading:
        prompt += f'Section: "{heading}"\n'
    if content:
        prompt += f"Section summary: {content[:300]}\n"
    prompt += (
        "Create a clean, corporate-style illustration. No text, no logos, "
        "no identifiable people. Muted professional colour palette."
    )
    return prompt


class LiteLLMImageGenerator:
    """Generates one image per prompt; returns a URL or data URL."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    async def generate(self, prompt: str) -> str:
        from litellm import acompletion

        kwargs: dict[str, Any] = {"timeout": self._config.timeout}
        if self._config.api_key not in ("", "no-key"):
            kwargs["api_key"] = self._config.api_key
        try:
            response = await acompletion(
                model=self._config.image_model,
                messages=[{"role": "user", "content": prompt}],
                modalities=["image", "text"],
                temperature=0.7,
                **kwargs,
            )
        except Exception as e:
            raise ImageGenerationError(f"Image request failed: {e}") from e

        url = _image_url_from_message(response.choices[0].message)
        if not url:
            raise ImageGenerationError("No image in response")
        log.debug("Generated image (%s...)", url[:40])
        return url


def _image_url_from_message(message: Any) -> str | None:
    images = getattr(message, "images", None) or []
    if images:
        first = images[0]
        image_url = first.get("image_url") if isinstance(first, dict) else getattr(first, "image_url", None)
        if isinstance(image_url, dict):
            return image_url.get("url")
        return getattr(image_url, "url", None)

    content = getattr(message, "content", None) or ""
    if content.startswith(("http://", "https://", "data:image")):
        return content.strip()
    m = _MARKDOWN_IMAGE.search(content)
    return m.group(1) if m else None
