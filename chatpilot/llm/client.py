"""Async Claude API client for text and vision prompts."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any

import anthropic

from chatpilot.config import settings

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}

_client: anthropic.AsyncAnthropic | None = None


@dataclass
class ImagePart:
    """Inline image bytes attached to a prompt."""

    data: bytes
    media_type: str

    def to_block(self) -> dict[str, Any]:
        """Serialize as a Claude base64 image content block."""
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": self.media_type,
                "data": base64.b64encode(self.data).decode(),
            },
        }


def _get_client() -> anthropic.AsyncAnthropic:
    """Lazily initialize the Anthropic client."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
    return _client


async def complete_text(
    messages: list[dict[str, Any]],
    *,
    system: str | None = None,
    model: str | None = None,
    max_tokens: int | None = None,
) -> str:
    """Single-shot Claude call — no tools, no streaming.

    Raises whatever the SDK raises; callers decide how to degrade.
    """
    client = _get_client()
    kwargs: dict[str, Any] = {
        "model": model or settings.chat_model,
        "max_tokens": max_tokens or settings.max_tokens,
        "messages": messages,
    }
    if system is not None:
        kwargs["system"] = system
    response = await client.messages.create(**kwargs)
    return "".join(block.text for block in response.content if block.type == "text")


async def complete_prompt(prompt: str, images: list[ImagePart] | None = None) -> str:
    """Send one user turn, optionally with inline images, and return the reply text."""
    if not images:
        return await complete_text([{"role": "user", "content": prompt}])

    content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
    content.extend(image.to_block() for image in images)
    logger.info("Sending prompt with %d image(s)", len(images))
    return await complete_text([{"role": "user", "content": content}])
