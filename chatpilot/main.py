"""Chatpilot entry point."""

import asyncio
import contextlib
import logging

from chatpilot.config import settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper()),
)
logger = logging.getLogger(__name__)


async def serve() -> None:
    """Run the chat server until cancelled."""
    from chatpilot.app import AssistantApp
    from chatpilot.web.server import WebServer

    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY is empty; chat and reminder parsing will fail")
    if not settings.hf_api_key:
        logger.warning("HF_API_KEY is empty; embeddings and image generation will fail")

    server = WebServer(AssistantApp())
    await server.start()
    try:
        await asyncio.Event().wait()
    finally:
        await server.stop()


def main() -> None:
    """Start the chat server."""
    logger.info("Starting Chatpilot with model %s...", settings.chat_model)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve())


if __name__ == "__main__":
    main()
