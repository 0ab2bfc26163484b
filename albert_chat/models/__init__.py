"""Pydantic models for sessions and transcript entries.

Provides type safety and validation for data crossing the auth provider,
the backend store and the chat view.

Models:
    - AuthUser: Identity of the signed-in user
    - AuthSession: Tokens plus user for the current browser
    - Message: One transcript entry (user message, reply or placeholder)
"""

import time
import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER_TEXT = "typing..."


class Sender(str, Enum):
    """Author of a transcript entry."""

    USER = "user"
    BOT = "bot"


class MessageStatus(str, Enum):
    """Lifecycle of a transcript entry."""

    PENDING = "pending"
    FINAL = "final"


class AuthUser(BaseModel):
    """The authenticated user.

    Attributes:
        id: Provider user identifier (UUID string).
        email: Account e-mail, if the provider shares one.
    """

    id: str = Field(..., min_length=1, description="Provider user ID")
    email: str | None = Field(None, description="Account e-mail address")


class AuthSession(BaseModel):
    """Authentication state for one browser.

    Attributes:
        access_token: Bearer token for backend requests.
        refresh_token: Token used to renew the access token.
        expires_at: Unix timestamp when the access token expires.
        user: The signed-in user.
    """

    access_token: str = Field(..., min_length=1)
    refresh_token: str = ""
    expires_at: int | None = None
    user: AuthUser

    def is_expired(self, leeway: int = 30) -> bool:
        """Whether the access token expires within ``leeway`` seconds."""
        if self.expires_at is None:
            return False
        return self.expires_at - leeway <= int(time.time())


class Message(BaseModel):
    """A single entry in the displayed transcript.

    Entries are immutable. A pending entry is replaced as a whole when
    its reply resolves.

    Attributes:
        id: Stable entry identifier, used to replace placeholders.
        sender: Who wrote the message.
        text: Raw message text (markdown for replies).
        status: ``pending`` for the typing placeholder, otherwise ``final``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    sender: Sender
    text: str
    status: MessageStatus = MessageStatus.FINAL

    @classmethod
    def placeholder(cls) -> "Message":
        """Create the transient typing indicator for a pending reply."""
        return cls(sender=Sender.BOT, text=PLACEHOLDER_TEXT, status=MessageStatus.PENDING)

    @property
    def is_pending(self) -> bool:
        return self.status is MessageStatus.PENDING

    @property
    def is_bot(self) -> bool:
        return self.sender is Sender.BOT


__all__ = [
    "PLACEHOLDER_TEXT",
    "AuthSession",
    "AuthUser",
    "Message",
    "MessageStatus",
    "Sender",
]
