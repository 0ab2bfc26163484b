"""Transcript state machine behind the chat view.

Each send walks Idle -> user message appended -> placeholder shown ->
reply received -> Idle. The placeholder is a pending Message replaced by
id when its own reply arrives, so overlapping sends never overwrite each
other's entries. The controller knows nothing about NiceGUI; the view
re-renders from ``on_change``.
"""

import asyncio
import logging
from collections.abc import Callable

from albert_chat.assistant import FALLBACK_REPLY, MessageExchanger
from albert_chat.chat.markdown import split_related_topics
from albert_chat.models import Message, Sender
from albert_chat.models.schemas import StoreResult
from albert_chat.store import TranscriptStore

logger = logging.getLogger(__name__)

COPY_FEEDBACK_SECONDS = 2.0
MIN_STARS = 1
MAX_STARS = 5


class ChatController:
    """Owns the transcript, ratings and related topics of one conversation."""

    def __init__(
        self,
        exchanger: MessageExchanger,
        store: TranscriptStore,
        *,
        related_topics_enabled: bool = False,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            exchanger: Assistant webhook client.
            store: Persistence for this conversation.
            related_topics_enabled: Offer follow-up topics parsed from replies.
            on_change: Called after every visible state change.
        """
        self._exchanger = exchanger
        self._store = store
        self._related_topics_enabled = related_topics_enabled
        self.on_change = on_change
        self.transcript: list[Message] = []
        self.ratings: dict[int, int] = {}
        self.related_topics: list[str] = []
        self._sent_ids: set[str] = set()

    @property
    def chat_id(self) -> str:
        return self._store.chat_id

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def show_history(self, messages: list[Message]) -> None:
        """Put a loaded history in front of the entries sent from this view.

        Entries created by ``send`` before the history arrived are kept after
        it, along with their ratings; anything else is replaced.
        """
        old_index = {entry.id: index for index, entry in enumerate(self.transcript)}
        kept = [entry for entry in self.transcript if entry.id in self._sent_ids]
        offset = len(messages)
        self.ratings = {
            offset + position: self.ratings[old_index[entry.id]]
            for position, entry in enumerate(kept)
            if old_index[entry.id] in self.ratings
        }
        self.transcript = list(messages) + kept
        if not kept:
            self.related_topics = []
        self._changed()

    def _replace(self, entry_id: str, message: Message) -> None:
        self._sent_ids.add(message.id)
        for index, entry in enumerate(self.transcript):
            if entry.id == entry_id:
                self.transcript[index] = message
                return
        logger.warning(f"Placeholder {entry_id} no longer in transcript, appending reply")
        self.transcript.append(message)

    async def send(self, text: str) -> Message | None:
        """Send a user message and wait for the assistant's reply.

        Blank input is ignored. The user message and the placeholder show
        immediately; the placeholder is swapped for the reply once it
        arrives. Both messages are persisted.

        Args:
            text: Raw user input.

        Returns:
            The assistant's reply entry, or None for blank input.
        """
        if not text.strip():
            return None

        user_message = Message(sender=Sender.USER, text=text)
        placeholder = Message.placeholder()
        self._sent_ids.update((user_message.id, placeholder.id))
        self.transcript.append(user_message)
        self.related_topics = []
        self.transcript.append(placeholder)
        self._changed()

        reply_text = FALLBACK_REPLY
        try:
            await self._store.store_message(text, is_bot=False)
            try:
                reply_text = await self._exchanger.send(text, self.chat_id, self._store.user_id)
            except Exception:
                logger.exception("Assistant call failed unexpectedly")
        finally:
            # The placeholder never outlives its send
            reply = Message(sender=Sender.BOT, text=reply_text)
            self._replace(placeholder.id, reply)
            if self._related_topics_enabled:
                _, self.related_topics = split_related_topics(reply_text)
            self._changed()

        await self._store.store_message(reply_text, is_bot=True)
        return reply

    async def select_topic(self, topic: str) -> Message | None:
        """Send a suggested follow-up topic as the next message."""
        return await self.send(topic)

    def shows_topics(self, index: int) -> bool:
        """Whether related-topic buttons belong under the entry at ``index``."""
        if not self.related_topics or index != len(self.transcript) - 1:
            return False
        entry = self.transcript[index]
        return entry.is_bot and not entry.is_pending

    async def rate(self, index: int, stars: int) -> StoreResult:
        """Rate the assistant reply at ``index`` with 1 to 5 stars.

        The rating shows immediately and is not rolled back if storing it
        fails.

        Raises:
            ValueError: If the star value is out of range or the index does
                not point at a final assistant reply.
        """
        if not MIN_STARS <= stars <= MAX_STARS:
            raise ValueError(f"Rating must be between {MIN_STARS} and {MAX_STARS}, got {stars}")
        if not 0 <= index < len(self.transcript):
            raise ValueError(f"No message at index {index}")
        entry = self.transcript[index]
        if not entry.is_bot or entry.is_pending:
            raise ValueError(f"Message {index} is not an assistant reply")

        self.ratings[index] = stars
        self._changed()
        return await self._store.store_rating(index, stars, entry.text)


class CopyIndicator:
    """Marks a message as copied for a short while."""

    def __init__(
        self,
        duration: float = COPY_FEEDBACK_SECONDS,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._duration = duration
        self.on_change = on_change
        self.active_index: int | None = None
        self._handle: asyncio.TimerHandle | None = None

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def mark(self, index: int) -> None:
        """Show the copied state for ``index``; must run inside the event loop."""
        if self._handle is not None:
            self._handle.cancel()
        self.active_index = index
        self._changed()
        self._handle = asyncio.get_running_loop().call_later(self._duration, self._reset)

    def _reset(self) -> None:
        self.active_index = None
        self._handle = None
        self._changed()

    def is_active(self, index: int) -> bool:
        return self.active_index == index
