"""Supermemory REST client.

Two operations are used by the chat handler:

- ``search(query, tags)``: semantic search scoped to container tags.
- ``add_memory(content, tags)``: store a new memory under container tags.

The API key is read from ``SUPERMEMORY_API_KEY``. Without it every call
raises :class:`MemoryServiceError`; the chat handler turns that into a 500.
Nothing here retries.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from memchat.config import settings
from memchat.memory.models import SearchResult

logger = logging.getLogger(__name__)

SEARCH_PATH = "/v3/search"
MEMORIES_PATH = "/v3/memories"


class MemoryServiceError(Exception):
    """The memory service could not be reached or rejected a request."""


class SupermemoryClient:
    """Async client for the hosted Supermemory API.

    Get the shared instance via ``SupermemoryClient.get()``.
    """

    _instance: SupermemoryClient | None = None

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = settings.supermemory_api_key if api_key is None else api_key
        self._base_url = (base_url or settings.supermemory_base_url).rstrip("/")
        self._timeout = timeout or settings.memory_request_timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

        if not self._api_key:
            logger.warning(
                "Memory client has no API key. Set SUPERMEMORY_API_KEY; "
                "chat requests will fail until it is configured."
            )

    @classmethod
    def get(cls) -> SupermemoryClient:
        """Return the shared client instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    def _client(self) -> httpx.AsyncClient:
        """Return (and lazily create) the underlying httpx client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    # -- Read ----------------------------------------------------------------

    async def search(self, query: str, tags: Sequence[str]) -> list[SearchResult]:
        """Search memories matching *query* within the given container tags.

        Returns results in the order ranked by the service.
        """
        data = await self._post(SEARCH_PATH, {"q": query, "containerTags": list(tags)})
        return self._parse_results(data)

    # -- Write ---------------------------------------------------------------

    async def add_memory(self, content: str, tags: Sequence[str]) -> dict[str, Any]:
        """Store *content* as a memory under the given container tags.

        Returns the service acknowledgement (typically ``{"id", "status"}``).
        """
        data = await self._post(MEMORIES_PATH, {"content": content, "containerTags": list(tags)})
        logger.debug("Stored memory for tags=%s: %s", list(tags), content[:80])
        return data if isinstance(data, dict) else {}

    # -- Helpers -------------------------------------------------------------

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        if not self._api_key:
            raise MemoryServiceError("SUPERMEMORY_API_KEY is not configured")

        try:
            resp = await self._client().post(path, json=payload)
        except httpx.HTTPError as exc:
            raise MemoryServiceError(f"Request to {path} failed: {exc}") from exc

        if resp.status_code >= 400:
            raise MemoryServiceError(
                f"Memory service returned {resp.status_code} for {path}: {resp.text[:200]}"
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise MemoryServiceError(f"Memory service sent invalid JSON for {path}") from exc

    @staticmethod
    def _parse_results(raw: Any) -> list[SearchResult]:
        """Normalize a search response body into SearchResult models."""
        if not isinstance(raw, dict):
            raise MemoryServiceError("Unexpected search response shape")

        try:
            return [SearchResult.model_validate(item) for item in raw.get("results") or []]
        except ValidationError as exc:
            raise MemoryServiceError("Unexpected search result format") from exc
