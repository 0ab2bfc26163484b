"""Service container wiring the remote clients together.

Built once at process start and handed to the API and the UI pages.
All clients share a single httpx.AsyncClient, closed on shutdown.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

import httpx

from albert_chat.assistant import MessageExchanger
from albert_chat.auth import SessionManager, SupabaseAuth
from albert_chat.chat import ChatController
from albert_chat.config import ChatConfig, get_chat_config
from albert_chat.models import AuthSession
from albert_chat.observability import FailureMonitor
from albert_chat.store import HistoryLoader, SupabaseRest, TranscriptStore

logger = logging.getLogger(__name__)

OAUTH_CALLBACK_PATH = "/auth/callback"


class ChatServices:
    """Holds the configured clients for auth, storage and the assistant."""

    def __init__(
        self,
        config: ChatConfig | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the services.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            http: Optional HTTP client (tests pass one with a mock transport).
        """
        self.config = config or get_chat_config()
        self.http = http or self._create_http_client()
        self.monitor = FailureMonitor()
        self.auth = SupabaseAuth(self.config.supabase_url, self.config.supabase_anon_key, self.http)
        self.backend = SupabaseRest(
            self.config.supabase_url, self.config.supabase_anon_key, self.http
        )
        self.exchanger = MessageExchanger(self.config.webhook_url, self.http)
        self.history = HistoryLoader(self.backend)

    def _create_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.webhook_timeout)

    def session_manager(self, storage: MutableMapping[str, Any] | None = None) -> SessionManager:
        """Create the session manager for one browser."""
        return SessionManager(
            self.auth,
            storage,
            redirect_to=f"{self.config.site_url}{OAUTH_CALLBACK_PATH}",
        )

    def chat_controller(self, manager: SessionManager) -> ChatController:
        """Create the controller for the signed-in user's conversation.

        Raises:
            ValueError: If the manager has no established conversation.
        """
        session: AuthSession | None = manager.session
        if session is None or manager.chat_id is None:
            raise ValueError("A signed-in session with a conversation id is required")
        store = TranscriptStore(
            self.backend,
            user_id=session.user.id,
            chat_id=manager.chat_id,
            token=manager.get_access_token,
            monitor=self.monitor,
        )
        return ChatController(
            self.exchanger,
            store,
            related_topics_enabled=self.config.related_topics_enabled,
        )

    async def aclose(self) -> None:
        """Close the shared HTTP client."""
        await self.http.aclose()
        logger.info("HTTP client closed")
