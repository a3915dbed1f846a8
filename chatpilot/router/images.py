"""Image generation — Stable Diffusion via the Hugging Face Inference API."""

from __future__ import annotations

import base64
import logging

from chatpilot.config import settings
from chatpilot.llm import huggingface
from chatpilot.llm.prompt import build_image_prompt
from chatpilot.models import BotReply

logger = logging.getLogger(__name__)

NEGATIVE_PROMPT = "blurry, ugly, deformed, pixelated, low quality, garbled"
IMAGE_ERROR = "⚠️ Error generating the image. Please try again later."


def to_data_url(data: bytes, media_type: str) -> str:
    """Encode raw bytes as a ``data:`` URL."""
    return f"data:{media_type};base64,{base64.b64encode(data).decode()}"


async def generate_image(subject: str) -> BotReply:
    """Render *subject* and return it as a data URL. Never raises."""
    try:
        image = await huggingface.text_to_image(
            build_image_prompt(subject),
            negative_prompt=NEGATIVE_PROMPT,
            num_inference_steps=settings.image_steps,
            guidance_scale=settings.image_guidance_scale,
        )
    except Exception:
        logger.exception("Image generation failed for %r", subject)
        return BotReply(text=IMAGE_ERROR)

    return BotReply(
        text=f'Here\'s what I imagined for "{subject}":',
        image_url=to_data_url(image.data, image.media_type),
    )
