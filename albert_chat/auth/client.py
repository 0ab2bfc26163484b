"""Supabase Auth (GoTrue) REST client.

Thin async wrapper over the ``/auth/v1`` endpoints the chat client needs:
password sign-in and sign-up, OAuth with PKCE, token refresh, user lookup
and sign-out. Holds no state; sessions belong to the SessionManager.
"""

import base64
import hashlib
import logging
import secrets
import time
from typing import Any

import httpx

from albert_chat.models import AuthSession, AuthUser

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when the auth provider rejects or fails a request."""

    pass


def generate_code_verifier() -> str:
    """Create a random PKCE code verifier (64 URL-safe characters)."""
    return secrets.token_urlsafe(48)


def code_challenge_for(verifier: str) -> str:
    """Derive the S256 PKCE challenge for a verifier."""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def _error_message(response: httpx.Response) -> str:
    """Extract the provider's error text from a failed response."""
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(data, dict):
        for key in ("error_description", "msg", "message", "error"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {response.status_code}"


def parse_session(data: dict[str, Any]) -> AuthSession:
    """Build an AuthSession from a token endpoint payload.

    Raises:
        AuthError: If the payload carries no access token or user.
    """
    if not data.get("access_token") or not data.get("user"):
        raise AuthError("Auth provider returned no session")
    expires_at = data.get("expires_at")
    if expires_at is None and data.get("expires_in") is not None:
        expires_at = int(time.time()) + int(data["expires_in"])
    return AuthSession(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token") or "",
        expires_at=expires_at,
        user=AuthUser(id=data["user"]["id"], email=data["user"].get("email")),
    )


class SupabaseAuth:
    """Client for the Supabase Auth REST API."""

    def __init__(self, base_url: str, anon_key: str, http: httpx.AsyncClient) -> None:
        """Initialize the auth client.

        Args:
            base_url: Supabase project URL.
            anon_key: Public anon key sent with every request.
            http: Shared HTTP client.
        """
        self._base_url = f"{base_url.rstrip('/')}/auth/v1"
        self._anon_key = anon_key
        self._http = http

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self._anon_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._http.request(
                method,
                f"{self._base_url}{path}",
                params=params,
                json=json,
                headers=self._headers(access_token),
            )
        except httpx.RequestError as e:
            raise AuthError(f"Connection failed: {e}") from e

        if response.is_error:
            raise AuthError(_error_message(response))
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise AuthError(f"Unreadable response from auth server: {e}") from e

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Sign in with e-mail and password.

        Raises:
            AuthError: On invalid credentials or transport failure.
        """
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return parse_session(data)

    async def sign_up(
        self, email: str, password: str, redirect_to: str | None = None
    ) -> AuthSession | None:
        """Register a new account.

        Returns:
            The new session, or None when e-mail confirmation is pending.
        """
        params = {"redirect_to": redirect_to} if redirect_to else None
        data = await self._request(
            "POST", "/signup", params=params, json={"email": email, "password": password}
        )
        if not data.get("access_token"):
            logger.info(f"Sign-up for {email} awaits e-mail confirmation")
            return None
        return parse_session(data)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return parse_session(data)

    async def exchange_code_for_session(self, code: str, code_verifier: str) -> AuthSession:
        """Complete an OAuth PKCE flow."""
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "pkce"},
            json={"auth_code": code, "code_verifier": code_verifier},
        )
        return parse_session(data)

    async def get_user(self, access_token: str) -> AuthUser:
        """Look up the user owning an access token."""
        data = await self._request("GET", "/user", access_token=access_token)
        return AuthUser(id=data["id"], email=data.get("email"))

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session on the provider side."""
        await self._request("POST", "/logout", access_token=access_token)

    def authorize_url(self, provider: str, redirect_to: str, code_challenge: str) -> str:
        """Build the browser URL that starts a third-party sign-in."""
        url = httpx.URL(
            f"{self._base_url}/authorize",
            params={
                "provider": provider,
                "redirect_to": redirect_to,
                "code_challenge": code_challenge,
                "code_challenge_method": "s256",
            },
        )
        return str(url)
