"""Per-browser authentication state and conversation identity.

The SessionManager owns the current AuthSession and the Conversation
Identifier. Exactly one identifier is minted per login event; reloading a
page while signed in restores the stored one instead of creating another.
"""

import logging
import secrets
import string
import time
from collections.abc import Callable, MutableMapping
from enum import Enum
from typing import Any

from pydantic import ValidationError

from albert_chat.auth.client import (
    AuthError,
    SupabaseAuth,
    code_challenge_for,
    generate_code_verifier,
)
from albert_chat.models import AuthSession

logger = logging.getLogger(__name__)

SESSION_KEY = "auth_session"
CHAT_ID_KEY = "chat_id"
VERIFIER_KEY = "pkce_code_verifier"

_CHAT_ID_ALPHABET = string.ascii_lowercase + string.digits


class AuthEvent(str, Enum):
    """Authentication state changes delivered to listeners."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


AuthListener = Callable[[AuthEvent, AuthSession | None], None]


def generate_chat_id() -> str:
    """Create a conversation identifier: millisecond timestamp plus random suffix."""
    suffix = "".join(secrets.choice(_CHAT_ID_ALPHABET) for _ in range(9))
    return f"chat_{int(time.time() * 1000)}_{suffix}"


class SessionManager:
    """Tracks sign-in state for one browser and notifies listeners.

    State survives page reloads through ``storage``, a JSON-serialisable
    mapping (NiceGUI's per-user storage in the app, a dict in tests).
    """

    def __init__(
        self,
        auth: SupabaseAuth,
        storage: MutableMapping[str, Any] | None = None,
        redirect_to: str = "http://localhost:8000/auth/callback",
    ) -> None:
        """Initialize the session manager.

        Args:
            auth: Auth provider client.
            storage: Persistent per-browser mapping. In-memory if omitted.
            redirect_to: OAuth callback URL of this app.
        """
        self._auth = auth
        self._storage: MutableMapping[str, Any] = storage if storage is not None else {}
        self._redirect_to = redirect_to
        self._listeners: list[AuthListener] = []
        self.session: AuthSession | None = None
        self.chat_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener for auth state changes.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: AuthEvent) -> None:
        logger.debug(f"Auth event {event.value}")
        for listener in list(self._listeners):
            listener(event, self.session)

    def _persist(self) -> None:
        if self.session is None:
            return
        self._storage[SESSION_KEY] = self.session.model_dump(mode="json")
        self._storage[CHAT_ID_KEY] = self.chat_id

    def _clear_storage(self) -> None:
        self._storage.pop(SESSION_KEY, None)
        self._storage.pop(CHAT_ID_KEY, None)

    def _establish(self, session: AuthSession) -> None:
        """Adopt a freshly signed-in session and mint a conversation id."""
        previous = self.session
        self.session = session
        if previous is None or previous.user.id != session.user.id or self.chat_id is None:
            self.chat_id = generate_chat_id()
            logger.info(f"Started conversation {self.chat_id} for user {session.user.id}")
        self._persist()
        self._emit(AuthEvent.SIGNED_IN)

    async def restore(self) -> AuthSession | None:
        """Recover the stored session, if any, and validate it.

        Expired tokens are refreshed. The stored conversation id is kept so
        a reload continues the same conversation.

        Returns:
            The restored session, or None when the user must sign in.
        """
        raw = self._storage.get(SESSION_KEY)
        if not raw:
            return None

        try:
            session = AuthSession.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding malformed stored session: {e}")
            self._clear_storage()
            return None

        try:
            if session.is_expired():
                session = await self._auth.refresh_session(session.refresh_token)
            else:
                await self._auth.get_user(session.access_token)
        except AuthError as e:
            logger.info(f"Stored session rejected by auth provider: {e}")
            self._clear_storage()
            return None

        self.session = session
        self.chat_id = self._storage.get(CHAT_ID_KEY) or generate_chat_id()
        self._persist()
        self._emit(AuthEvent.INITIAL_SESSION)
        return session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Sign in with e-mail and password.

        Raises:
            AuthError: If the provider rejects the credentials.
        """
        session = await self._auth.sign_in_with_password(email.strip(), password)
        self._establish(session)
        return session

    async def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register an account; signs in immediately if no confirmation is required."""
        session = await self._auth.sign_up(email.strip(), password, redirect_to=self._redirect_to)
        if session is not None:
            self._establish(session)
        return session

    def oauth_url(self, provider: str) -> str:
        """Start a third-party sign-in and return the URL to open."""
        verifier = generate_code_verifier()
        self._storage[VERIFIER_KEY] = verifier
        return self._auth.authorize_url(provider, self._redirect_to, code_challenge_for(verifier))

    async def complete_oauth(self, code: str) -> AuthSession:
        """Finish a third-party sign-in with the code from the callback.

        Raises:
            AuthError: If no sign-in was started here or the exchange fails.
        """
        verifier = self._storage.pop(VERIFIER_KEY, None)
        if not verifier:
            raise AuthError("No sign-in in progress for this browser")
        session = await self._auth.exchange_code_for_session(code, verifier)
        self._establish(session)
        return session

    async def get_access_token(self) -> str:
        """Return a valid access token, refreshing it when it has expired.

        Raises:
            AuthError: If nobody is signed in or the refresh fails.
        """
        if self.session is None:
            raise AuthError("Not signed in")
        if self.session.is_expired():
            self.session = await self._auth.refresh_session(self.session.refresh_token)
            self._persist()
            self._emit(AuthEvent.TOKEN_REFRESHED)
        return self.session.access_token

    async def sign_out(self) -> None:
        """Sign out locally and revoke the session remotely (best effort)."""
        if self.session is not None:
            try:
                await self._auth.sign_out(self.session.access_token)
            except AuthError as e:
                logger.warning(f"Remote sign-out failed: {e}")
            logger.info(f"User {self.session.user.id} signed out")

        self.session = None
        self.chat_id = None
        self._clear_storage()
        self._emit(AuthEvent.SIGNED_OUT)
