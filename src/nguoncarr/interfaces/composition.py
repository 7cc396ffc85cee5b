"""Composition root: wire config, caches, HTTP client, and the plugin."""

from __future__ import annotations

import time
from collections.abc import Callable

import httpx
import structlog

from nguoncarr.application.context import PluginContext
from nguoncarr.application.use_cases.catalog_plugin import CatalogPlugin
from nguoncarr.domain.ports.random_source import RandomSourcePort
from nguoncarr.infrastructure.catalog.client import HttpxCatalogClient
from nguoncarr.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)


def build_plugin(
    config: AppConfig,
    *,
    http_client: httpx.AsyncClient | None = None,
    rng: RandomSourcePort | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> CatalogPlugin:
    """Create a CatalogPlugin with its own context and cache pair.

    When *http_client* is omitted the plugin creates one and closes it
    in ``aclose()``; a caller-supplied client stays owned by the caller.
    """
    context = PluginContext.from_config(config, rng=rng, clock=clock)

    owns_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient(
            timeout=config.api_timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": config.api_user_agent},
        )

    api = HttpxCatalogClient(
        http_client=http_client,
        cache=context.http_cache,
        base_url=config.api_base_url,
        list_ttl=config.cache.http_ttl_seconds,
        detail_ttl=config.cache.detail_ttl_seconds,
        clock=clock,
    )

    log.info(
        "plugin_built",
        base_url=config.api_base_url,
        http_capacity=config.cache.http_capacity,
        detail_capacity=config.cache.detail_capacity,
        preferred_stream_type=config.preferred_stream_type,
    )
    return CatalogPlugin(
        context,
        api,
        closer=http_client.aclose if owns_client else None,
    )
