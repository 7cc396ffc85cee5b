"""Shared test fixtures for the nguoncarr test suite."""

from __future__ import annotations

import copy
from typing import Any

import httpx
import pytest

from nguoncarr.application.context import PluginContext
from nguoncarr.infrastructure.config.schema import AppConfig

# ---------------------------------------------------------------------------
# Upstream JSON fixtures
# ---------------------------------------------------------------------------

SERIES_DETAIL: dict[str, Any] = {
    "status": "success",
    "movie": {
        "id": "a1b2c3",
        "name": "Thần Điêu Đại Hiệp",
        "slug": "than-dieu-dai-hiep",
        "original_name": "The Return of the Condor Heroes",
        "description": "<p>Dương Quá và Tiểu Long Nữ.</p>",
        "total_episodes": 3,
        "poster_url": "https://img.example/poster.jpg",
        "thumb_url": "https://img.example/thumb.jpg",
        "category": {
            "1": {"group": {"name": "Định dạng"}, "list": [{"name": "Phim bộ"}]},
            "2": {"group": {"name": "Thể loại"}, "list": [{"name": "Kiếm hiệp"}]},
            "3": {"group": {"name": "Năm"}, "list": [{"name": "2014"}]},
        },
        "episodes": [
            {
                "server_name": "Vietsub #1",
                "items": [
                    {"name": "1", "embed": "https://embed.example/v1/1", "m3u8": "https://hls.example/v1/1.m3u8"},
                    {"name": "2", "embed": "https://embed.example/v1/2", "m3u8": "https://hls.example/v1/2.m3u8"},
                    {"name": "3", "embed": "https://embed.example/v1/3", "m3u8": "https://hls.example/v1/3.m3u8"},
                ],
            },
            {
                "server_name": "Thuyết minh",
                "items": [
                    {"name": "1", "embed": "https://embed.example/tm/1", "m3u8": "https://hls.example/tm/1.m3u8"},
                    {"name": "2", "embed": "https://embed.example/tm/2", "m3u8": "https://hls.example/tm/2.m3u8"},
                ],
            },
        ],
    },
}

MOVIE_DETAIL: dict[str, Any] = {
    "status": "success",
    "movie": {
        "id": "m-42",
        "name": "Lật Mặt 7",
        "slug": "lat-mat-7",
        "total_episodes": 1,
        "poster_url": "https://img.example/latmat.jpg",
        "year": 2024,
        "episodes": [
            {
                "server_name": "Vietsub",
                "items": [
                    {"name": "Full", "embed": "https://embed.example/lm7", "m3u8": "https://hls.example/lm7.m3u8"},
                ],
            },
        ],
    },
}

SEARCH_RESULTS: dict[str, Any] = {
    "status": "success",
    "items": [
        {
            "name": "Thần Điêu Đại Hiệp",
            "slug": "than-dieu-dai-hiep",
            "total_episodes": 3,
            "poster_url": "https://img.example/poster.jpg",
        },
        {
            "name": "Lật Mặt 7",
            "slug": "lat-mat-7",
            "total_episodes": 1,
            "poster_url": "https://img.example/latmat.jpg",
        },
    ],
}


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FirstChoice:
    """Deterministic RandomSourcePort: always picks the first element."""

    def choice(self, seq: Any) -> Any:
        return seq[0]


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def app_config() -> AppConfig:
    """Default configuration with diagnostics off."""
    return AppConfig.model_validate({"plugin": {"debug_log": False}})


@pytest.fixture()
def plugin_context(app_config: AppConfig, clock: FakeClock) -> PluginContext:
    return PluginContext.from_config(app_config, rng=FirstChoice(), clock=clock)


@pytest.fixture()
async def http_client() -> Any:
    async with httpx.AsyncClient() as client:
        yield client


# ---------------------------------------------------------------------------
# Payload fixtures (deep copies, safe to mutate)
# ---------------------------------------------------------------------------


@pytest.fixture()
def series_detail() -> dict[str, Any]:
    return copy.deepcopy(SERIES_DETAIL)


@pytest.fixture()
def movie_detail() -> dict[str, Any]:
    return copy.deepcopy(MOVIE_DETAIL)


@pytest.fixture()
def search_results() -> dict[str, Any]:
    return copy.deepcopy(SEARCH_RESULTS)
