"""Catalog plugin use case: public operations exposed to the host.

Read-style operations (search, get_item, get_streams, discover,
get_home, browse) never raise; failures are logged and an empty result
is returned.  ``play`` propagates its failures.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import structlog

from nguoncarr.application.context import PluginContext
from nguoncarr.domain.entities.catalog import (
    PLUGIN_ID,
    BriefItem,
    BrowsePage,
    CatalogItem,
    CatalogNotFoundError,
    EpisodeRef,
    HomePage,
    HomeSection,
    NamedOption,
    NormalizedDetail,
    Season,
    Stream,
    StreamGroup,
)
from nguoncarr.domain.ports.catalog_api import CatalogApiPort
from nguoncarr.infrastructure.catalog.id_codec import decode, encode, qualify
from nguoncarr.infrastructure.catalog.normalizer import normalize_list
from nguoncarr.infrastructure.catalog.resolver import DetailResolver
from nguoncarr.infrastructure.catalog.streams import choose_stream, extract_streams
from nguoncarr.infrastructure.common.converters import (
    dig,
    first_present,
    to_episode_number,
    to_int,
)

log = structlog.get_logger(__name__)

STREAM_GROUP_NAME = "Nguonc"

GENRES: tuple[str, ...] = ("Kiếm hiệp", "Tình Cảm", "Hành Động", "Hài", "Phiêu Lưu")

COUNTRIES: tuple[NamedOption, ...] = (
    NamedOption(slug="viet-nam", name="Việt Nam"),
    NamedOption(slug="thai-lan", name="Thái Lan"),
    NamedOption(slug="han-quoc", name="Hàn Quốc"),
    NamedOption(slug="trung-quoc", name="Trung Quốc"),
    NamedOption(slug="my", name="Mỹ"),
)

BROWSE_LISTS: tuple[NamedOption, ...] = (
    NamedOption(slug="phim-moi-cap-nhat", name="Mới cập nhật"),
    NamedOption(slug="phim-le", name="Phim lẻ"),
    NamedOption(slug="phim-bo", name="Phim bộ"),
    NamedOption(slug="phim-hoat-hinh", name="Hoạt hình"),
    NamedOption(slug="tv-shows", name="TV Shows"),
)

_TRENDING_QUERIES = ("hot", "top")
_UNTITLED = "Không có tiêu đề"


def _unique_by_id(items: Iterable[BriefItem]) -> list[BriefItem]:
    seen: set[str] = set()
    out: list[BriefItem] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        out.append(item)
    return out


def build_seasons(slug: str, detail: NormalizedDetail) -> tuple[Season, ...]:
    """One season listing the first server's episodes (server 0 ids)."""
    first = detail.episodes[0] if detail.episodes else None
    items = first.items if first is not None else ()
    refs = []
    for idx, item in enumerate(items):
        number = to_episode_number(item.name)
        if number is None:
            number = idx + 1
        refs.append(
            EpisodeRef(
                episode_number=number,
                id=qualify(encode(slug, number, 0)),
                title=f"Tập {item.name or idx + 1}",
            )
        )
    return (Season(season_number=1, episodes=tuple(refs)),)


class CatalogPlugin:
    """Public operations of the nguonc plugin.

    Owns its context (config + cache pair) for its whole lifetime.
    Concurrent calls for the same subject are not coalesced; each one
    runs its own fetch chain.
    """

    def __init__(
        self,
        context: PluginContext,
        api: CatalogApiPort,
        *,
        resolver: DetailResolver | None = None,
        closer: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.context = context
        self._api = api
        self._resolver = resolver or DetailResolver(
            api=api,
            detail_cache=context.detail_cache,
            detail_ttl=context.config.cache.detail_ttl_seconds,
            clock=context.clock,
        )
        self._closer = closer

    async def aclose(self) -> None:
        if self._closer is not None:
            await self._closer()
            self._closer = None

    async def __aenter__(self) -> CatalogPlugin:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Detail-backed operations
    # ------------------------------------------------------------------

    async def search(self, query: str) -> list[BriefItem]:
        """Free-text search. Empty query or any failure yields ``[]``."""
        if not query or not str(query).strip():
            return []
        try:
            items = normalize_list(await self._api.search(str(query)))
        except Exception:
            log.warning("catalog_search_error", query=query, exc_info=True)
            return []
        self.context.diag("catalog_search", query=query, count=len(items))
        return items

    async def get_item(self, global_id: str) -> CatalogItem | None:
        """Title view with seasons for series; None when unresolvable."""
        if not global_id:
            self.context.diag("catalog_get_item_empty_id")
            return None

        subject = decode(global_id).subject
        try:
            detail = await self._resolver.resolve(subject)
        except Exception:
            log.warning("catalog_get_item_error", subject=subject, exc_info=True)
            return None

        movie = detail.movie
        slug = movie.slug or subject
        is_series = movie.total_episodes > 1
        item = CatalogItem(
            id=qualify(slug),
            plugin_id=PLUGIN_ID,
            kind="series" if is_series else "movie",
            title=movie.name or movie.original_name or _UNTITLED,
            year=movie.year,
            overview=movie.description,
            poster=movie.poster_url,
            backdrop=movie.thumb_url or movie.poster_url,
            seasons=build_seasons(slug, detail) if is_series else None,
        )
        self.context.diag("catalog_get_item", subject=subject, kind=item.kind)
        return item

    async def get_streams(self, global_id: str) -> list[StreamGroup]:
        """Stream groups for the episode/server encoded in *global_id*.

        Returns ``[]`` when the title cannot be resolved or no server has
        the requested episode.
        """
        if not global_id:
            return []

        cid = decode(global_id)
        try:
            detail = await self._resolver.resolve(cid.subject)
        except Exception:
            log.warning("catalog_get_streams_error", subject=cid.subject, exc_info=True)
            return []

        streams = extract_streams(detail, cid.episode_number, cid.server_index)
        self.context.diag(
            "catalog_get_streams",
            subject=cid.subject,
            episode=cid.episode_number,
            server=cid.server_index,
            count=len(streams),
        )
        if not streams:
            return []
        return [StreamGroup(name=STREAM_GROUP_NAME, streams=tuple(streams))]

    async def play(
        self,
        global_id: str,
        server_index: int | None = None,
        episode_index: int | None = None,
    ) -> Stream:
        """Pick the single best stream.

        Explicit *server_index* and 0-based *episode_index* override the
        values encoded in *global_id*.

        Raises:
            ValueError: *global_id* is empty.
            CatalogNotFoundError: unresolvable title or no playable stream.
        """
        if not global_id:
            raise ValueError("globalId is required")

        cid = decode(global_id)
        server = cid.server_index if server_index is None else int(server_index)
        episode = cid.episode_number if episode_index is None else int(episode_index) + 1

        detail = await self._resolver.resolve(cid.subject)
        streams = extract_streams(detail, episode, server)
        chosen = choose_stream(streams, self.context.config.preferred_stream_type)
        if chosen is None:
            raise CatalogNotFoundError(cid.subject)

        self.context.diag(
            "catalog_play", subject=cid.subject, episode=episode, url=chosen.url
        )
        return chosen

    # ------------------------------------------------------------------
    # Aggregate views
    # ------------------------------------------------------------------

    async def discover(
        self,
        type: str | None = None,
        genre: str | None = None,
        limit: int = 20,
    ) -> list[BriefItem]:
        """Genre, trending, or newest titles, deduplicated by id."""
        if type == "genre" and genre:
            queries: tuple[str, ...] = (genre,)
        elif type == "trending":
            queries = _TRENDING_QUERIES
        elif type == "new":
            year = dt.date.today().year
            queries = (str(year), str(year - 1), str(year - 2))
        else:
            return []

        items: list[BriefItem] = []
        for query in queries:
            items.extend(await self.search(query))
            if len(items) >= limit * 2:
                break
        return _unique_by_id(items)[:limit]

    async def get_home(self, rows: int = 3, limit: int = 14) -> HomePage:
        """Home rows per genre plus one uniformly chosen banner."""
        sections = []
        for genre in self.list_genres()[:rows]:
            items = await self.discover(type="genre", genre=genre, limit=limit)
            sections.append(HomeSection(title=genre, items=tuple(items)))

        pool = _unique_by_id(item for section in sections for item in section.items)
        banner = self.context.rng.choice(pool) if pool else None
        self.context.diag(
            "catalog_get_home", sections=len(sections), banner=banner is not None
        )
        return HomePage(banner=banner, sections=tuple(sections))

    async def browse(self, list_key: str, page: int = 1) -> BrowsePage:
        """One page of a browse list; empty page on failure."""
        page = to_int(page, 1) or 1
        try:
            payload = await self._api.browse(list_key, page)
        except Exception:
            log.warning("catalog_browse_error", list_key=list_key, page=page, exc_info=True)
            return BrowsePage(page=page)

        current = first_present(
            dig(payload, "paginate", "current_page"),
            dig(payload, "data", "params", "page"),
            dig(payload, "params", "page"),
        )
        total = first_present(
            dig(payload, "paginate", "total_page"),
            dig(payload, "data", "params", "totalPages"),
            dig(payload, "params", "totalPages"),
        )
        return BrowsePage(
            items=tuple(normalize_list(payload)),
            page=to_int(current, page),
            total_pages=to_int(total),
        )

    # ------------------------------------------------------------------
    # Static lists
    # ------------------------------------------------------------------

    def list_genres(self) -> list[str]:
        return list(GENRES)

    def list_countries(self) -> list[NamedOption]:
        return list(COUNTRIES)

    def list_types(self) -> list[NamedOption]:
        return list(BROWSE_LISTS)

    def list_years(self, start: int = 2010, end: int | None = None) -> list[NamedOption]:
        end = dt.date.today().year if end is None else end
        return [NamedOption(slug=str(y), name=str(y)) for y in range(end, start - 1, -1)]
