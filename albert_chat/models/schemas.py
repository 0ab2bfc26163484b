from pydantic import BaseModel, Field


class ConversationRow(BaseModel):
    """Row of the ``conversations`` table.

    Attributes:
        user_id: Author account.
        chat_id: Conversation identifier.
        message: Message text.
        is_bot: True for assistant replies.
        created_at: Server-side insertion timestamp (absent on insert).
    """

    user_id: str
    chat_id: str
    message: str
    is_bot: bool = False
    created_at: str | None = None


class RatingRow(BaseModel):
    """Row of the ``message_ratings`` table.

    Keyed by (chat_id, message_index, user_id).
    """

    message_index: int = Field(..., ge=0)
    user_id: str
    chat_id: str
    rating: int = Field(..., ge=1, le=5)
    message: str


class StoreResult(BaseModel):
    """Outcome of a persistence call.

    Attributes:
        ok: Whether the backend accepted the write.
        error: Error description if the write failed.
    """

    ok: bool
    error: str | None = None
