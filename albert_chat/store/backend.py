"""Supabase PostgREST client.

Minimal async table access for the chat client: filtered selects,
inserts and upserts. Every request runs as the signed-in user so row
level security applies.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when a backend read or write fails."""

    pass


class SupabaseRest:
    """Client for the Supabase REST (PostgREST) API."""

    def __init__(self, base_url: str, anon_key: str, http: httpx.AsyncClient) -> None:
        """Initialize the REST client.

        Args:
            base_url: Supabase project URL.
            anon_key: Public anon key sent with every request.
            http: Shared HTTP client.
        """
        self._base_url = f"{base_url.rstrip('/')}/rest/v1"
        self._anon_key = anon_key
        self._http = http

    def _headers(self, token: str, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {token}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        *,
        token: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(
                method,
                f"{self._base_url}/{table}",
                params=params,
                json=json,
                headers=self._headers(token, prefer),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = e.response.text[:200]
            raise BackendError(
                f"{method} {table} failed with HTTP {e.response.status_code}: {detail}"
            ) from e
        except httpx.RequestError as e:
            raise BackendError(f"{method} {table} failed: {e}") from e
        return response

    async def select(
        self,
        table: str,
        *,
        token: str,
        filters: dict[str, str] | None = None,
        order: str | None = None,
    ) -> list[dict[str, Any]]:
        """Read rows matching equality filters.

        Args:
            table: Table name.
            token: User access token.
            filters: Column to value equality filters.
            order: PostgREST order clause, e.g. ``created_at.asc``.

        Returns:
            Matching rows as dictionaries.
        """
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = order

        response = await self._request("GET", table, token=token, params=params)
        try:
            rows = response.json()
        except ValueError as e:
            raise BackendError(f"GET {table} returned a non-JSON body: {e}") from e
        if not isinstance(rows, list):
            raise BackendError(
                f"GET {table} returned {type(rows).__name__}, expected a list of rows"
            )
        return rows

    async def insert(self, table: str, row: dict[str, Any], *, token: str) -> None:
        """Insert one row."""
        await self._request("POST", table, token=token, json=row, prefer="return=minimal")

    async def upsert(
        self,
        table: str,
        row: dict[str, Any],
        *,
        token: str,
        on_conflict: list[str],
    ) -> None:
        """Insert a row or overwrite the one sharing the conflict key."""
        await self._request(
            "POST",
            table,
            token=token,
            params={"on_conflict": ",".join(on_conflict)},
            json=row,
            prefer="resolution=merge-duplicates,return=minimal",
        )
