"""nguonc catalog API client: async httpx implementation with caching.

Raw JSON responses are kept in a ``BoundedCache`` keyed by the fully
qualified request URL.  A cached response is reused while it is
younger than the TTL it was stored with; a stale hit is ignored and
the URL is fetched again.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from nguoncarr.domain.entities.catalog import CacheEntry, CatalogNetworkError
from nguoncarr.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://phim.nguonc.com"

# Cache TTLs (seconds)
TTL_LIST = 300.0  # 5 minutes
TTL_DETAIL = 3_600.0  # 1 hour

_BODY_EXCERPT = 200


class HttpxCatalogClient:
    """Async client for the nguonc JSON API using httpx + CachePort.

    Implements ``CatalogApiPort`` from domain.ports.catalog_api.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        cache: CachePort,
        base_url: str = DEFAULT_BASE_URL,
        list_ttl: float = TTL_LIST,
        detail_ttl: float = TTL_DETAIL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._http = http_client
        self._cache = cache
        self.base_url = base_url.rstrip("/")
        self._list_ttl = list_ttl
        self._detail_ttl = detail_ttl
        self._clock = clock

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def build_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def get_json(self, path: str, *, ttl: float) -> Any:
        """GET *path* and return parsed JSON, served from cache while fresh.

        Raises:
            CatalogNetworkError: timeout, transport error, non-2xx status,
                or a body that is not valid JSON.
        """
        url = self.build_url(path)
        cached = self._cache.get(url)
        if isinstance(cached, CacheEntry) and cached.is_fresh(self._clock()):
            log.debug("catalog_http_cache_hit", url=url)
            return cached.value

        try:
            resp = await self._http.get(url, headers={"accept": "application/json"})
        except httpx.TimeoutException as exc:
            raise CatalogNetworkError(
                f"Timeout fetching {url}", url=url, timeout=True
            ) from exc
        except httpx.HTTPError as exc:
            raise CatalogNetworkError(f"Fetch failed for {url}: {exc}", url=url) from exc

        if not resp.is_success:
            body = resp.text[:_BODY_EXCERPT]
            raise CatalogNetworkError(
                f"HTTP {resp.status_code} : {body}",
                url=url,
                status=resp.status_code,
                body=body,
            )

        try:
            data = resp.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise CatalogNetworkError(
                f"Invalid JSON from {url}",
                url=url,
                status=resp.status_code,
                body=resp.text[:_BODY_EXCERPT],
            ) from exc

        self._cache.set(url, CacheEntry(value=data, inserted_at=self._clock(), ttl=ttl))
        return data

    # ------------------------------------------------------------------
    # Public API (CatalogApiPort)
    # ------------------------------------------------------------------

    async def search(self, query: str) -> Any:
        return await self.get_json(
            f"/api/films/search?keyword={quote(query, safe='')}", ttl=self._list_ttl
        )

    async def detail_by_slug(self, slug: str) -> Any:
        return await self.get_json(
            f"/api/film/{quote(slug, safe='')}", ttl=self._detail_ttl
        )

    async def detail_by_id(self, catalog_id: str) -> Any:
        return await self.get_json(
            f"/api/film?id={quote(catalog_id, safe='')}", ttl=self._detail_ttl
        )

    async def browse(self, list_key: str, page: int = 1) -> Any:
        return await self.get_json(
            f"/api/films/danh-sach/{quote(list_key, safe='')}?page={int(page)}",
            ttl=self._list_ttl,
        )
