"""Async HTTP surface for the chat client.

Exposes the same affordances as a chat UI: send a message with optional
files, view the transcript, view/clear/delete reminders, view/clear memory,
and poll for fired reminder alerts. Uses aiohttp's AppRunner/TCPSite for
non-blocking start/stop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiohttp import web

from chatpilot.config import settings
from chatpilot.conversation import ConversationBusyError, EmptyMessageError
from chatpilot.router.attachments import Attachment

if TYPE_CHECKING:
    from chatpilot.app import AssistantApp
    from chatpilot.models import ConversationMemory

logger = logging.getLogger(__name__)

ASSISTANT_KEY: web.AppKey[AssistantApp] = web.AppKey("assistant")


def _assistant(request: web.Request) -> AssistantApp:
    return request.app[ASSISTANT_KEY]


def _memory_json(memory: ConversationMemory) -> dict[str, Any]:
    data = memory.model_dump(mode="json", exclude={"embedding"})
    data["embedding_dimensions"] = len(memory.embedding or [])
    return data


def _message_text(value: object) -> str:
    """A missing or null message is empty text; anything but a string is rejected."""
    if value is None:
        return ""
    if not isinstance(value, str):
        msg = f"Expected message to be a string, got {type(value).__name__}"
        raise ValueError(msg)
    return value


async def _read_chat_request(request: web.Request) -> tuple[str, list[Attachment]]:
    """Accept either JSON ``{"message": ...}`` or multipart with ``files`` parts."""
    if request.content_type == "application/json":
        payload = await request.json()
        if not isinstance(payload, dict):
            raise ValueError("Expected a JSON object")
        return _message_text(payload.get("message")), []

    form = await request.post()
    text = _message_text(form.get("message"))
    attachments = []
    for field in form.getall("files", []):
        if isinstance(field, web.FileField):
            attachments.append(
                Attachment.from_upload(field.filename, field.content_type, field.file.read())
            )
    return text, attachments


# -- Handlers ------------------------------------------------------------------


async def _health(request: web.Request) -> web.Response:
    """GET /health — basic liveness check."""
    return web.json_response({"status": "ok"})


async def _handle_chat(request: web.Request) -> web.Response:
    """POST /chat — run one turn through the response router."""
    try:
        text, attachments = await _read_chat_request(request)
    except ValueError:
        logger.warning("Chat request rejected: unreadable body")
        return web.json_response({"error": "invalid request body"}, status=400)

    conversation = _assistant(request).conversation
    try:
        user_message, bot_message = await conversation.send(text, attachments)
    except EmptyMessageError:
        return web.json_response({"error": "message or files required"}, status=400)
    except ConversationBusyError:
        return web.json_response({"error": "previous message still in progress"}, status=409)

    return web.json_response({
        "user": user_message.model_dump(mode="json"),
        "bot": bot_message.model_dump(mode="json"),
    })


async def _list_messages(request: web.Request) -> web.Response:
    """GET /messages — the session transcript."""
    messages = _assistant(request).conversation.messages
    return web.json_response({"messages": [m.model_dump(mode="json") for m in messages]})


async def _list_reminders(request: web.Request) -> web.Response:
    """GET /reminders — all reminders with a pending count."""
    reminders = await _assistant(request).reminders.get_all()
    return web.json_response({
        "reminders": [r.model_dump(mode="json") for r in reminders],
        "pending": sum(1 for r in reminders if r.is_pending),
    })


async def _clear_reminders(request: web.Request) -> web.Response:
    """DELETE /reminders — remove every reminder."""
    count = await _assistant(request).reminders.clear()
    return web.json_response({"cleared": count})


async def _delete_reminder(request: web.Request) -> web.Response:
    """DELETE /reminders/{id} — remove a single reminder."""
    reminder_id = request.match_info["reminder_id"]
    if not await _assistant(request).reminders.delete(reminder_id):
        return web.json_response({"error": "reminder not found"}, status=404)
    return web.json_response({"deleted": reminder_id})


async def _list_memory(request: web.Request) -> web.Response:
    """GET /memory — stored exchanges (newest last) without raw vectors."""
    assistant = _assistant(request)
    memories = await assistant.memory.get_all()
    return web.json_response({
        "memories": [_memory_json(m) for m in memories],
        "count": len(memories),
        "limit": assistant.memory.limit,
    })


async def _clear_memory(request: web.Request) -> web.Response:
    """DELETE /memory — forget every stored exchange."""
    count = await _assistant(request).memory.clear()
    return web.json_response({"cleared": count})


async def _drain_notifications(request: web.Request) -> web.Response:
    """GET /notifications — reminder alerts fired since the last poll."""
    return web.json_response({"notifications": _assistant(request).inbox.drain()})


def create_web_app(assistant: AssistantApp) -> web.Application:
    """Build the aiohttp Application with routes."""
    app = web.Application(client_max_size=settings.max_upload_size)
    app[ASSISTANT_KEY] = assistant
    app.router.add_get("/health", _health)
    app.router.add_post("/chat", _handle_chat)
    app.router.add_get("/messages", _list_messages)
    app.router.add_get("/reminders", _list_reminders)
    app.router.add_delete("/reminders", _clear_reminders)
    app.router.add_delete("/reminders/{reminder_id}", _delete_reminder)
    app.router.add_get("/memory", _list_memory)
    app.router.add_delete("/memory", _clear_memory)
    app.router.add_get("/notifications", _drain_notifications)
    return app


class WebServer:
    """Manages the aiohttp server and the assistant's lifecycle."""

    def __init__(
        self,
        assistant: AssistantApp,
        host: str | None = None,
        port: int | None = None,
    ) -> None:
        self.assistant = assistant
        self.host = host or settings.web_host
        self.port = port or settings.web_port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start the assistant and begin listening."""
        await self.assistant.start()
        self._runner = web.AppRunner(create_web_app(self.assistant))
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("Chat server listening on http://%s:%d", self.host, self.port)

    async def stop(self) -> None:
        """Shut down the server and the reminder poller."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Chat server stopped")
        await self.assistant.stop()
