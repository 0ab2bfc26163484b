"""Persistence of chat messages and star ratings.

Writes are best effort: a failed write is logged and reported to the
FailureMonitor, then dropped. Nothing is retried and nothing is raised to
the chat view.
"""

import logging
from collections.abc import Awaitable, Callable

from albert_chat.auth.client import AuthError
from albert_chat.models.schemas import ConversationRow, RatingRow, StoreResult
from albert_chat.observability import FailureMonitor
from albert_chat.store.backend import BackendError, SupabaseRest
from albert_chat.store.history import CONVERSATIONS_TABLE, TokenSource

logger = logging.getLogger(__name__)

RATINGS_TABLE = "message_ratings"
RATING_CONFLICT_KEY = ["chat_id", "message_index", "user_id"]


class TranscriptStore:
    """Stores the messages and ratings of one conversation."""

    def __init__(
        self,
        backend: SupabaseRest,
        *,
        user_id: str,
        chat_id: str,
        token: TokenSource,
        monitor: FailureMonitor | None = None,
    ) -> None:
        """Initialize the store for a conversation.

        Args:
            backend: REST client for the backend tables.
            user_id: Signed-in user.
            chat_id: Conversation identifier.
            token: Coroutine function returning the user's access token.
            monitor: Sink for write failures.
        """
        self._backend = backend
        self.user_id = user_id
        self.chat_id = chat_id
        self._token = token
        self._monitor = monitor or FailureMonitor()

    async def _write(
        self, operation: str, write: Callable[[str], Awaitable[None]]
    ) -> StoreResult:
        try:
            await write(await self._token())
        except (AuthError, BackendError) as e:
            self._monitor.record_failure(operation, str(e))
            return StoreResult(ok=False, error=str(e))
        return StoreResult(ok=True)

    async def store_message(self, text: str, is_bot: bool) -> StoreResult:
        """Append one message to the conversation.

        Args:
            text: Message text as displayed.
            is_bot: True for assistant replies.

        Returns:
            StoreResult describing whether the backend accepted the row.
        """
        row = ConversationRow(
            user_id=self.user_id, chat_id=self.chat_id, message=text, is_bot=is_bot
        )
        return await self._write(
            "store_message",
            lambda token: self._backend.insert(
                CONVERSATIONS_TABLE, row.model_dump(exclude_none=True), token=token
            ),
        )

    async def store_rating(self, index: int, value: int, message: str) -> StoreResult:
        """Record a star rating for the message at ``index``.

        The row is upserted on (chat_id, message_index, user_id), so the
        latest rating wins.
        """
        row = RatingRow(
            message_index=index,
            user_id=self.user_id,
            chat_id=self.chat_id,
            rating=value,
            message=message,
        )
        result = await self._write(
            "store_rating",
            lambda token: self._backend.upsert(
                RATINGS_TABLE, row.model_dump(), token=token, on_conflict=RATING_CONFLICT_KEY
            ),
        )
        if result.ok:
            logger.info(f"Rating {value} stored for message {index} of {self.chat_id}")
        return result
