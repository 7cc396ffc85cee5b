"""Detail resolution with a slug → id → search fallback chain.

A subject taken from a composite id may be a slug or a numeric catalog
id, and occasionally neither (a title typed by hand).  Each
interpretation is a strategy; ``first_success`` runs them in order and
returns the first result.  Failures are kept as labeled diagnostics and
logged, never raised until every strategy has failed.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import structlog

from nguoncarr.domain.entities.catalog import (
    CacheEntry,
    CatalogError,
    CatalogNotFoundError,
    NormalizedDetail,
    StrategyFailure,
)
from nguoncarr.domain.ports.cache import CachePort
from nguoncarr.domain.ports.catalog_api import CatalogApiPort
from nguoncarr.infrastructure.catalog.id_codec import strip_namespace
from nguoncarr.infrastructure.catalog.normalizer import (
    brief_slug,
    normalize_detail,
    raw_list_items,
)

log = structlog.get_logger(__name__)

T = TypeVar("T")

Strategy = tuple[str, Callable[[], Awaitable[T]]]

DETAIL_TTL = 3_600.0


class StrategiesExhausted(CatalogError):
    """Every strategy passed to ``first_success`` failed."""

    def __init__(self, failures: tuple[StrategyFailure, ...]) -> None:
        super().__init__("; ".join(f"{f.label}: {f.error}" for f in failures))
        self.failures = failures


async def first_success(strategies: Sequence[Strategy]) -> T:
    """Await each strategy in order; return the first result.

    Only ``CatalogError`` counts as a strategy failure.  Anything else
    is a bug and propagates.

    Raises:
        StrategiesExhausted: with one labeled diagnostic per strategy.
    """
    failures: list[StrategyFailure] = []
    for label, attempt in strategies:
        try:
            return await attempt()
        except CatalogError as exc:
            failures.append(StrategyFailure(label=label, error=str(exc)))
            log.info("catalog_strategy_failed", strategy=label, error=str(exc))
    raise StrategiesExhausted(tuple(failures))


class DetailResolver:
    """Resolve an ambiguous subject into a NormalizedDetail.

    Normalized records are cached under ``slug:<x>`` / ``id:<x>``.  The
    cache is written only after a fetch normalized successfully.
    """

    def __init__(
        self,
        *,
        api: CatalogApiPort,
        detail_cache: CachePort,
        detail_ttl: float = DETAIL_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api = api
        self._cache = detail_cache
        self._ttl = detail_ttl
        self._clock = clock

    # ------------------------------------------------------------------
    # Cached fetchers
    # ------------------------------------------------------------------

    def _cached(self, key: str) -> NormalizedDetail | None:
        entry = self._cache.get(key)
        if isinstance(entry, CacheEntry) and entry.is_fresh(self._clock()):
            return entry.value
        return None

    def _store(self, key: str, detail: NormalizedDetail) -> None:
        self._cache.set(
            key, CacheEntry(value=detail, inserted_at=self._clock(), ttl=self._ttl)
        )

    async def by_slug(self, slug: str) -> NormalizedDetail:
        key = f"slug:{slug}"
        cached = self._cached(key)
        if cached is not None:
            return cached

        payload = await self._api.detail_by_slug(slug)
        detail = normalize_detail(payload, slug)
        if detail is None:
            raise CatalogNotFoundError(slug)
        self._store(key, detail)
        return detail

    async def by_id(self, catalog_id: str) -> NormalizedDetail:
        key = f"id:{catalog_id}"
        cached = self._cached(key)
        if cached is not None:
            return cached

        payload = await self._api.detail_by_id(catalog_id)
        detail = normalize_detail(payload, None)
        if detail is None:
            raise CatalogNotFoundError(catalog_id)
        self._store(key, detail)
        return detail

    async def by_search(self, query: str) -> NormalizedDetail:
        payload = await self._api.search(query)
        hits = raw_list_items(payload)
        if not hits:
            raise CatalogNotFoundError(query)

        # same field order as the search result ids handed to the host
        slug = strip_namespace(brief_slug(hits[0]))
        if not slug:
            raise CatalogNotFoundError(query)
        log.debug("catalog_search_hit", query=query, slug=slug)
        return await self.by_slug(slug)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(self, subject: str) -> NormalizedDetail:
        """Try slug, then numeric id, then free-text search.

        Raises:
            CatalogNotFoundError: when all three strategies failed; the
                per-strategy diagnostics are on ``attempts``.
        """
        if not subject:
            raise CatalogNotFoundError(subject)

        try:
            return await first_success(
                [
                    ("slug", lambda: self.by_slug(subject)),
                    ("id", lambda: self.by_id(subject)),
                    ("search", lambda: self.by_search(subject)),
                ]
            )
        except StrategiesExhausted as exc:
            log.warning(
                "catalog_detail_not_found",
                subject=subject,
                attempts=[f.label for f in exc.failures],
            )
            raise CatalogNotFoundError(subject, exc.failures) from exc
