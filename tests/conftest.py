"""Pytest fixtures and shared test configuration.

Provides an in-memory stand-in for the remote services (Supabase Auth,
Supabase REST and the assistant webhook) served through
``httpx.MockTransport``, so the real clients run unchanged in tests.

Fixtures:
    - fake_remote: In-memory Supabase + webhook state
    - http_client: AsyncClient routed to fake_remote
    - chat_config: Test configuration
    - services: ChatServices wired to fake_remote
    - signed_in_manager: SessionManager with an established session
"""

import json
import time
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest

from albert_chat.auth import SessionManager
from albert_chat.config import ChatConfig
from albert_chat.services import ChatServices

SUPABASE_URL = "https://supabase.test"
WEBHOOK_URL = "https://assistant.test/webhook/chat"
ANON_KEY = "anon-test-key"
TEST_EMAIL = "ada@example.com"
TEST_PASSWORD = "correct-horse"
TEST_USER_ID = "8a6f0c1e-user"


class FakeRemote:
    """In-memory Supabase project and assistant webhook."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            "conversations": [],
            "message_ratings": [],
        }
        self.users = {TEST_EMAIL: {"id": TEST_USER_ID, "password": TEST_PASSWORD}}
        self.access_tokens: dict[str, str] = {}
        self.refresh_tokens: dict[str, str] = {}
        self.auth_codes: dict[str, str] = {"valid-code": TEST_EMAIL}
        self.autoconfirm = False
        self.token_lifetime = 3600
        self.revoked: list[str] = []
        self.webhook_reply = "Hi there"
        self.webhook_status = 200
        self.webhook_fails = False
        self.webhook_calls: list[dict[str, str]] = []
        self.fail_reads = False
        self.fail_writes = False
        self._issued = 0
        self._clock = 0

    # --- auth -----------------------------------------------------------

    def issue_session(self, email: str) -> dict[str, Any]:
        self._issued += 1
        user_id = self.users[email]["id"]
        access, refresh = f"access-{self._issued}", f"refresh-{self._issued}"
        self.access_tokens[access] = email
        self.refresh_tokens[refresh] = email
        return {
            "access_token": access,
            "token_type": "bearer",
            "expires_in": self.token_lifetime,
            "expires_at": int(time.time()) + self.token_lifetime,
            "refresh_token": refresh,
            "user": {"id": user_id, "email": email},
        }

    def _auth(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/auth/v1")
        body = json.loads(request.content) if request.content else {}

        if path == "/token":
            grant = request.url.params.get("grant_type")
            if grant == "password":
                user = self.users.get(body.get("email", ""))
                if user is None or user["password"] != body.get("password"):
                    return httpx.Response(
                        400, json={"error_description": "Invalid login credentials"}
                    )
                return httpx.Response(200, json=self.issue_session(body["email"]))
            if grant == "refresh_token":
                email = self.refresh_tokens.pop(body.get("refresh_token", ""), None)
                if email is None:
                    return httpx.Response(400, json={"msg": "Invalid Refresh Token"})
                return httpx.Response(200, json=self.issue_session(email))
            if grant == "pkce":
                email = self.auth_codes.get(body.get("auth_code", ""))
                if email is None or not body.get("code_verifier"):
                    return httpx.Response(400, json={"msg": "invalid flow state"})
                return httpx.Response(200, json=self.issue_session(email))

        if path == "/signup":
            email = body["email"]
            self.users[email] = {"id": f"user-{len(self.users) + 1}", "password": body["password"]}
            if self.autoconfirm:
                return httpx.Response(200, json=self.issue_session(email))
            return httpx.Response(200, json={"id": self.users[email]["id"], "email": email})

        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        if path == "/user":
            email = self.access_tokens.get(token)
            if email is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json={"id": self.users[email]["id"], "email": email})
        if path == "/logout":
            self.revoked.append(token)
            self.access_tokens.pop(token, None)
            return httpx.Response(204)

        return httpx.Response(404, json={"msg": "not found"})

    # --- rest -----------------------------------------------------------

    def _rest(self, request: httpx.Request) -> httpx.Response:
        table = request.url.path.removeprefix("/rest/v1/")
        if not request.headers.get("Authorization", "").startswith("Bearer "):
            return httpx.Response(401, json={"message": "missing token"})
        rows = self.tables[table]

        if request.method == "GET":
            if self.fail_reads:
                return httpx.Response(500, json={"message": "database unavailable"})
            filters = {
                key: value.removeprefix("eq.")
                for key, value in request.url.params.items()
                if key not in ("select", "order")
            }
            result = [r for r in rows if all(str(r.get(k)) == v for k, v in filters.items())]
            if request.url.params.get("order") == "created_at.asc":
                result.sort(key=lambda r: r["created_at"])
            return httpx.Response(200, json=result)

        if self.fail_writes:
            return httpx.Response(500, json={"message": "database unavailable"})
        row = json.loads(request.content)
        on_conflict = request.url.params.get("on_conflict")
        if on_conflict:
            keys = on_conflict.split(",")
            for existing in rows:
                if all(existing[k] == row[k] for k in keys):
                    existing.update(row)
                    return httpx.Response(201)
        self._clock += 1
        rows.append({**row, "created_at": f"2026-10-19T12:00:{self._clock:02d}+00:00"})
        return httpx.Response(201)

    # --- webhook --------------------------------------------------------

    def _webhook(self, request: httpx.Request) -> httpx.Response:
        if self.webhook_fails:
            raise httpx.ConnectError("connection refused", request=request)
        self.webhook_calls.append(dict(request.url.params))
        return httpx.Response(self.webhook_status, text=self.webhook_reply)

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "assistant.test":
            return self._webhook(request)
        if request.headers.get("apikey") != ANON_KEY:
            return httpx.Response(401, json={"message": "No API key found in request"})
        if request.url.path.startswith("/auth/v1"):
            return self._auth(request)
        return self._rest(request)


@pytest.fixture
def fake_remote() -> FakeRemote:
    """Fresh in-memory remote services."""
    return FakeRemote()


@pytest.fixture
async def http_client(fake_remote: FakeRemote) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client whose requests are answered by fake_remote.

    Yields:
        AsyncClient with a mock transport.
    """
    transport = httpx.MockTransport(fake_remote.handler)
    async with httpx.AsyncClient(transport=transport) as client:
        yield client


@pytest.fixture
def chat_config() -> ChatConfig:
    """Configuration pointing at the fake services."""
    return ChatConfig(
        supabase_url=SUPABASE_URL,
        supabase_anon_key=ANON_KEY,
        webhook_url=WEBHOOK_URL,
        webhook_timeout=5.0,
        oauth_providers=["google", "facebook"],
        site_url="http://testserver",
        related_topics_enabled=False,
    )


@pytest.fixture
def services(chat_config: ChatConfig, http_client: httpx.AsyncClient) -> ChatServices:
    """Service container wired to the fake services."""
    return ChatServices(config=chat_config, http=http_client)


@pytest.fixture
async def signed_in_manager(services: ChatServices) -> SessionManager:
    """Session manager after a successful password sign-in."""
    manager = services.session_manager({})
    await manager.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)
    return manager
