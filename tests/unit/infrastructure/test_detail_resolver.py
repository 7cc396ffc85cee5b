"""Tests for DetailResolver and the first_success strategy runner."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from nguoncarr.domain.entities import (
    CatalogError,
    CatalogNetworkError,
    CatalogNotFoundError,
)
from nguoncarr.infrastructure.cache import BoundedCache
from nguoncarr.infrastructure.catalog.client import HttpxCatalogClient
from nguoncarr.infrastructure.catalog.resolver import (
    DetailResolver,
    StrategiesExhausted,
    first_success,
)

_BASE = "https://phim.nguonc.com"


@pytest.fixture()
def detail_cache() -> BoundedCache:
    return BoundedCache(10)


@pytest.fixture()
def api(http_client: httpx.AsyncClient, clock: Any) -> HttpxCatalogClient:
    return HttpxCatalogClient(http_client=http_client, cache=BoundedCache(10), clock=clock)


@pytest.fixture()
def resolver(api: HttpxCatalogClient, detail_cache: BoundedCache, clock: Any) -> DetailResolver:
    return DetailResolver(api=api, detail_cache=detail_cache, detail_ttl=3600, clock=clock)


# ---------------------------------------------------------------------------
# first_success
# ---------------------------------------------------------------------------


class TestFirstSuccess:
    @pytest.mark.asyncio()
    async def test_returns_first_success(self) -> None:
        first = AsyncMock(side_effect=CatalogError("nope"))
        second = AsyncMock(return_value="ok")
        third = AsyncMock(return_value="unused")

        result = await first_success([("a", first), ("b", second), ("c", third)])

        assert result == "ok"
        third.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_collects_labeled_failures(self) -> None:
        with pytest.raises(StrategiesExhausted) as exc_info:
            await first_success(
                [
                    ("a", AsyncMock(side_effect=CatalogError("first"))),
                    ("b", AsyncMock(side_effect=CatalogNetworkError("second"))),
                ]
            )

        assert [(f.label, f.error) for f in exc_info.value.failures] == [
            ("a", "first"),
            ("b", "second"),
        ]

    @pytest.mark.asyncio()
    async def test_unexpected_errors_propagate(self) -> None:
        with pytest.raises(KeyError):
            await first_success([("a", AsyncMock(side_effect=KeyError("bug")))])


# ---------------------------------------------------------------------------
# Resolution chain
# ---------------------------------------------------------------------------


class TestResolve:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_slug_hit(
        self,
        resolver: DetailResolver,
        detail_cache: BoundedCache,
        movie_detail: dict[str, Any],
    ) -> None:
        respx.get(f"{_BASE}/api/film/lat-mat-7").respond(json=movie_detail)

        detail = await resolver.resolve("lat-mat-7")

        assert detail.movie.name == "Lật Mặt 7"
        assert "slug:lat-mat-7" in detail_cache

    @respx.mock
    @pytest.mark.asyncio()
    async def test_falls_back_to_id(
        self,
        resolver: DetailResolver,
        detail_cache: BoundedCache,
        movie_detail: dict[str, Any],
    ) -> None:
        respx.get(f"{_BASE}/api/film/m-42").respond(status_code=404, text="not found")
        respx.get(f"{_BASE}/api/film").respond(json=movie_detail)

        detail = await resolver.resolve("m-42")

        assert detail.movie.slug == "lat-mat-7"
        assert "id:m-42" in detail_cache
        assert "slug:m-42" not in detail_cache

    @respx.mock
    @pytest.mark.asyncio()
    async def test_falls_back_to_search(
        self,
        resolver: DetailResolver,
        detail_cache: BoundedCache,
        series_detail: dict[str, Any],
    ) -> None:
        respx.get(f"{_BASE}/api/film/abc").respond(status_code=404, text="not found")
        respx.get(f"{_BASE}/api/film").respond(json={"status": "error"})
        respx.get(f"{_BASE}/api/films/search").respond(
            json={"items": [{"id": "ns:xyz", "name": "Xyz"}]}
        )
        xyz = respx.get(f"{_BASE}/api/film/xyz").respond(json=series_detail)

        detail = await resolver.resolve("abc")

        assert detail.movie.slug == "than-dieu-dai-hiep"
        assert xyz.called
        assert "slug:xyz" in detail_cache
        assert "slug:abc" not in detail_cache
        assert "id:abc" not in detail_cache

    @respx.mock
    @pytest.mark.asyncio()
    async def test_search_hit_follows_slug_over_catalog_id(
        self,
        resolver: DetailResolver,
        detail_cache: BoundedCache,
        movie_detail: dict[str, Any],
    ) -> None:
        respx.get(f"{_BASE}/api/film/Lat%20Mat").respond(status_code=404, text="not found")
        respx.get(f"{_BASE}/api/film").respond(json={"status": "error"})
        respx.get(f"{_BASE}/api/films/search").respond(
            json={"items": [{"id": "65f1c0ffee", "slug": "lat-mat-7", "name": "Lật Mặt 7"}]}
        )
        by_catalog_id = respx.get(f"{_BASE}/api/film/65f1c0ffee").respond(
            status_code=404, text="not found"
        )
        respx.get(f"{_BASE}/api/film/lat-mat-7").respond(json=movie_detail)

        detail = await resolver.resolve("Lat Mat")

        assert detail.movie.slug == "lat-mat-7"
        assert not by_catalog_id.called
        assert "slug:lat-mat-7" in detail_cache

    @respx.mock
    @pytest.mark.asyncio()
    async def test_all_strategies_fail(self, resolver: DetailResolver) -> None:
        respx.get(f"{_BASE}/api/film/abc").respond(status_code=500, text="err")
        respx.get(f"{_BASE}/api/film").respond(status_code=500, text="err")
        respx.get(f"{_BASE}/api/films/search").respond(json={"items": []})

        with pytest.raises(CatalogNotFoundError) as exc_info:
            await resolver.resolve("abc")

        assert str(exc_info.value) == 'Detail not found for "abc" by any method'
        assert [a.label for a in exc_info.value.attempts] == ["slug", "id", "search"]

    @pytest.mark.asyncio()
    async def test_empty_subject(self, resolver: DetailResolver) -> None:
        with pytest.raises(CatalogNotFoundError):
            await resolver.resolve("")


class TestDetailCache:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_fresh_detail_served_from_cache(
        self, resolver: DetailResolver, detail_cache: BoundedCache, movie_detail: dict[str, Any]
    ) -> None:
        route = respx.get(f"{_BASE}/api/film/lat-mat-7").respond(json=movie_detail)

        first = await resolver.by_slug("lat-mat-7")
        detail_cache.set("unrelated", 1)
        second = await resolver.by_slug("lat-mat-7")

        assert first is second
        assert route.call_count == 1

    @respx.mock
    @pytest.mark.asyncio()
    async def test_stale_detail_refetched(
        self, resolver: DetailResolver, clock: Any, movie_detail: dict[str, Any]
    ) -> None:
        route = respx.get(f"{_BASE}/api/film/lat-mat-7").respond(json=movie_detail)

        await resolver.by_slug("lat-mat-7")
        clock.advance(3601)
        await resolver.by_slug("lat-mat-7")

        assert route.call_count == 2
