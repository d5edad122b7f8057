"""Async Contentful Delivery API transport.

Reads only. Every failure (missing credentials, network, auth, 404, bad
payload) is logged and returned as a failed result; nothing raises past this
module and nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

CDN_BASE_URL = "https://cdn.contentful.com"

# Delivery API maximum page size
_PAGE_SIZE = 1000
# Upper bound on pages fetched for one content type
_MAX_PAGES = 50


class FetchResult(BaseModel):
    """Entries for one content type, or the reason there are none."""

    entries: list[dict[str, Any]] = []
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None


class EntryResult(BaseModel):
    entry: dict[str, Any] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ContentfulTransport:
    """Thin async client for the Contentful Content Delivery API.

    Provides two reads:
    - ``fetch`` — every entry of a content type (follows pagination)
    - ``fetch_entry`` — a single entry by id
    """

    def __init__(
        self,
        space_id: str | None,
        access_token: str | None,
        *,
        environment: str = "master",
        base_url: str = CDN_BASE_URL,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.space_id = space_id or ""
        self.access_token = access_token or ""
        self.environment = environment
        self.base_url = base_url.rstrip("/")
        self._http = http
        self._owns_http = http is None
        self._warned_credentials = False

    @property
    def configured(self) -> bool:
        return bool(self.space_id and self.access_token)

    async def __aenter__(self) -> "ContentfulTransport":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(follow_redirects=True)
        return self._http

    def _url(self, path: str) -> str:
        return f"{self.base_url}/spaces/{self.space_id}/environments/{self.environment}/{path}"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch(self, content_type: str, query: dict[str, Any] | None = None) -> FetchResult:
        """Return every entry of ``content_type``, optionally filtered by ``query``."""
        if not self.configured:
            # Once per transport; every content type would repeat it.
            if not self._warned_credentials:
                logger.error(
                    "Missing Contentful credentials (space_id=%s, access_token=%s)",
                    bool(self.space_id), bool(self.access_token),
                )
                self._warned_credentials = True
            return FetchResult(error="missing credentials")

        logger.debug("Fetching content of type %s (query=%s)", content_type, query)
        entries: list[dict[str, Any]] = []
        skip = 0
        for _ in range(_MAX_PAGES):
            params: dict[str, Any] = {"limit": _PAGE_SIZE, **(query or {})}
            params["content_type"] = content_type
            params["skip"] = skip

            payload, error = await self._get_json(self._url("entries"), params)
            if error is not None:
                logger.error("Failed to fetch content of type %s: %s", content_type, error)
                return FetchResult(error=error)

            items = payload.get("items")
            if not isinstance(items, list):
                logger.error("Unexpected %s payload: no items list", content_type)
                return FetchResult(error="malformed response: missing items")

            entries.extend(item for item in items if isinstance(item, dict))
            total = payload.get("total")
            skip += len(items)
            if not items or not isinstance(total, int) or skip >= total:
                break
        else:
            logger.warning("Stopped paging %s after %d pages", content_type, _MAX_PAGES)

        if entries:
            sample = entries[0]
            logger.debug(
                "Fetched %d %s entries (sample field keys: %s)",
                len(entries), content_type, sorted((sample.get("fields") or {}).keys()),
            )
        else:
            logger.warning("No %s entries found in Contentful", content_type)
        return FetchResult(entries=entries)

    async def fetch_entry(self, entry_id: str) -> EntryResult:
        """Return a single entry by id."""
        if not self.configured:
            return EntryResult(error="missing credentials")

        payload, error = await self._get_json(self._url(f"entries/{entry_id}"), {})
        if error is not None:
            logger.error("Failed to fetch entry %s: %s", entry_id, error)
            return EntryResult(error=error)
        return EntryResult(entry=payload)

    async def _get_json(
        self, url: str, params: dict[str, Any]
    ) -> tuple[dict[str, Any], str | None]:
        """GET ``url`` and decode a JSON object. Returns (payload, error)."""
        try:
            resp = await self._client().get(url, params=params, headers=self._headers())
        except httpx.TimeoutException as exc:
            return {}, f"request timed out: {exc}"
        except httpx.HTTPError as exc:
            return {}, f"{type(exc).__name__}: {exc}"

        if resp.status_code >= 400:
            message = ""
            try:
                body = resp.json()
                if isinstance(body, dict):
                    message = str(body.get("message") or "")
            except ValueError:
                pass
            return {}, f"HTTP {resp.status_code}" + (f": {message}" if message else "")

        try:
            payload = resp.json()
        except ValueError as exc:
            return {}, f"invalid JSON: {exc}"
        if not isinstance(payload, dict):
            return {}, f"invalid JSON: expected an object, got {type(payload).__name__}"
        return payload, None
