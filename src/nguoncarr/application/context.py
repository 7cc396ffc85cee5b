"""Per-instance plugin context: configuration plus the cache pair.

One context is built per plugin instance and handed to every
operation.  Nothing here is a module-level singleton, so two plugin
instances (or two tests) never share cache state.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from nguoncarr.domain.ports.cache import CachePort
from nguoncarr.domain.ports.random_source import RandomSourcePort
from nguoncarr.infrastructure.cache import BoundedCache
from nguoncarr.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)


@dataclass
class PluginContext:
    config: AppConfig
    http_cache: CachePort
    detail_cache: CachePort
    rng: RandomSourcePort = field(default_factory=random.Random)
    clock: Callable[[], float] = time.monotonic

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        rng: RandomSourcePort | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> PluginContext:
        """Build a context with fresh caches sized from *config*."""
        return cls(
            config=config,
            http_cache=BoundedCache(config.cache.http_capacity),
            detail_cache=BoundedCache(config.cache.detail_capacity),
            rng=rng if rng is not None else random.Random(),
            clock=clock,
        )

    def diag(self, event: str, **fields: object) -> None:
        """Diagnostic-only log event, emitted when ``debug_log`` is on."""
        if self.config.debug_log:
            log.info(event, **fields)
