"""Conversation history loading."""

import logging
from collections.abc import Awaitable, Callable

from pydantic import ValidationError

from albert_chat.auth.client import AuthError
from albert_chat.models import Message, Sender
from albert_chat.models.schemas import ConversationRow
from albert_chat.store.backend import BackendError, SupabaseRest

logger = logging.getLogger(__name__)

CONVERSATIONS_TABLE = "conversations"

TokenSource = Callable[[], Awaitable[str]]


def row_to_message(row: ConversationRow) -> Message:
    """Map a stored row to a transcript entry."""
    return Message(sender=Sender.BOT if row.is_bot else Sender.USER, text=row.message)


class HistoryLoader:
    """Rebuilds the transcript of a conversation from the backend."""

    def __init__(self, backend: SupabaseRest) -> None:
        self._backend = backend

    async def load(self, chat_id: str, token: TokenSource) -> list[Message]:
        """Fetch all stored messages of a conversation, oldest first.

        Failures are logged and yield an empty transcript; they never block
        the chat view. Rows that do not validate are skipped.

        Args:
            chat_id: Conversation identifier.
            token: Coroutine function returning the user's access token.

        Returns:
            Transcript entries in creation order.
        """
        try:
            rows = await self._backend.select(
                CONVERSATIONS_TABLE,
                token=await token(),
                filters={"chat_id": chat_id},
                order="created_at.asc",
            )
        except (AuthError, BackendError) as e:
            logger.error(f"Error fetching conversation history for {chat_id}: {e}")
            return []

        messages = []
        for position, row in enumerate(rows):
            try:
                messages.append(row_to_message(ConversationRow.model_validate(row)))
            except ValidationError as e:
                logger.warning(f"Skipping invalid row {position} of {chat_id}: {e}")

        logger.info(f"Loaded {len(messages)} stored messages for {chat_id}")
        return messages
