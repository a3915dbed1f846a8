"""Hugging Face Inference API client — feature extraction and text-to-image."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from chatpilot.config import settings

logger = logging.getLogger(__name__)


class HuggingFaceError(Exception):
    """Raised when an inference call returns an error or an unusable payload."""


@dataclass
class GeneratedImage:
    data: bytes
    media_type: str


def _model_url(model: str) -> str:
    return f"{settings.hf_inference_url.rstrip('/')}/{model}"


def _headers() -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if settings.hf_api_key:
        headers["Authorization"] = f"Bearer {settings.hf_api_key}"
    return headers


def _as_vector(payload: Any) -> list[float]:
    """Normalize a feature-extraction payload into a flat vector.

    The API returns either a flat list of floats or a nested list whose
    first row is the sentence embedding.
    """
    if not isinstance(payload, list) or not payload:
        return []
    first = payload[0]
    if isinstance(first, (int, float)):
        return [float(x) for x in payload]
    if isinstance(first, list) and first and isinstance(first[0], (int, float)):
        return [float(x) for x in first]
    return []


async def feature_extraction(text: str, model: str | None = None) -> list[float]:
    """Embed *text*. Returns an empty list on any failure."""
    model = model or settings.embedding_model
    try:
        async with httpx.AsyncClient(timeout=settings.hf_timeout_seconds) as client:
            resp = await client.post(
                _model_url(model), headers=_headers(), json={"inputs": text}
            )
        if resp.status_code != 200:
            logger.warning(
                "Feature extraction returned %d: %s", resp.status_code, resp.text[:200]
            )
            return []
        return _as_vector(resp.json())
    except (httpx.HTTPError, ValueError):
        logger.exception("Feature extraction request failed")
        return []


async def text_to_image(
    prompt: str,
    *,
    negative_prompt: str,
    num_inference_steps: int,
    guidance_scale: float,
    model: str | None = None,
) -> GeneratedImage:
    """Generate an image from *prompt*.

    Raises:
        HuggingFaceError: on a non-200 response or a non-image payload.
        httpx.HTTPError: on transport failures.
    """
    model = model or settings.image_model
    payload = {
        "inputs": prompt,
        "parameters": {
            "negative_prompt": negative_prompt,
            "num_inference_steps": num_inference_steps,
            "guidance_scale": guidance_scale,
        },
    }
    async with httpx.AsyncClient(timeout=settings.hf_timeout_seconds) as client:
        resp = await client.post(_model_url(model), headers=_headers(), json=payload)

    if resp.status_code != 200:
        msg = f"Text-to-image returned {resp.status_code}: {resp.text[:200]}"
        raise HuggingFaceError(msg)

    media_type = resp.headers.get("content-type", "image/jpeg").split(";")[0].strip()
    if not media_type.startswith("image/"):
        msg = f"Text-to-image returned non-image content: {media_type}"
        raise HuggingFaceError(msg)
    if not resp.content:
        msg = "Text-to-image returned an empty body"
        raise HuggingFaceError(msg)

    logger.info("Generated image (%d bytes, %s)", len(resp.content), media_type)
    return GeneratedImage(data=resp.content, media_type=media_type)
