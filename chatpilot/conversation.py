"""In-memory chat transcript with a single in-flight request."""

import logging

from chatpilot.models import Message
from chatpilot.router.attachments import Attachment
from chatpilot.router.pipeline import ResponseRouter

logger = logging.getLogger(__name__)

GREETING = (
    "👋 Hello! I'm your AI Assistant.\n\n"
    "⏰ Reminders: tell me things like 'remind me to call mom tomorrow at 3pm'\n"
    "🎨 Image generation: ask me to 'generate an image of a sunset'\n"
    "🧠 Memory: I remember our conversations and use them as context\n"
    "📎 File analysis: attach images or documents for analysis\n\n"
    "How can I help you today?"
)
EMPTY_REPLY = "Sorry, I could not process that."
UNEXPECTED_ERROR = "An error occurred. Please try again later."


class ConversationBusyError(RuntimeError):
    """A previous message is still being answered."""


class EmptyMessageError(ValueError):
    """Neither text nor files were supplied."""


class Conversation:
    """Transcript for one session. Messages are appended, never removed."""

    def __init__(self, router: ResponseRouter) -> None:
        self._router = router
        self._messages: list[Message] = [Message(id="initial", sender="bot", text=GREETING)]
        self._busy = False

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def busy(self) -> bool:
        return self._busy

    async def send(
        self, text: str, attachments: list[Attachment] | None = None
    ) -> tuple[Message, Message]:
        """Append the user's message, route it, and append the bot's reply.

        Raises:
            EmptyMessageError: if there is no text and no attachment.
            ConversationBusyError: if another send is still in progress.
        """
        attachments = attachments or []
        if not text.strip() and not attachments:
            raise EmptyMessageError("Message has no text and no attachments")
        if self._busy:
            raise ConversationBusyError("A previous message is still being answered")

        self._busy = True
        try:
            user_message = Message(
                sender="user",
                text=text,
                files=[a.filename for a in attachments] or None,
            )
            self._messages.append(user_message)

            try:
                reply = await self._router.respond(text, attachments)
                bot_message = Message(
                    sender="bot",
                    text=reply.text or EMPTY_REPLY,
                    image_url=reply.image_url,
                )
            except Exception:
                logger.exception("Response pipeline raised")
                bot_message = Message(sender="bot", text=UNEXPECTED_ERROR)

            self._messages.append(bot_message)
            return user_message, bot_message
        finally:
            self._busy = False
