"""Tolerant mapping of upstream JSON envelopes onto the catalog model.

The nguonc API has shipped several response shapes over time.  Each
accepted shape is an explicit matcher; matchers are tried in order and
the first one that recognizes the payload wins.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from nguoncarr.domain.entities.catalog import (
    PLUGIN_ID,
    BriefItem,
    EpisodeItem,
    EpisodeServer,
    MovieRecord,
    NormalizedDetail,
)
from nguoncarr.infrastructure.common.converters import (
    dig,
    first_present,
    strip_html,
    to_int,
    to_number,
    year_from_text,
)

Envelope = Callable[[Any], list[Any] | None]


# ---------------------------------------------------------------------------
# List envelopes
# ---------------------------------------------------------------------------


def _bare_array(payload: Any) -> list[Any] | None:
    return payload if isinstance(payload, list) else None


def _items(payload: Any) -> list[Any] | None:
    value = dig(payload, "items")
    return value if isinstance(value, list) else None


def _data_items(payload: Any) -> list[Any] | None:
    value = dig(payload, "data", "items")
    return value if isinstance(value, list) else None


def _data_array(payload: Any) -> list[Any] | None:
    value = dig(payload, "data")
    return value if isinstance(value, list) else None


LIST_ENVELOPES: tuple[tuple[str, Envelope], ...] = (
    ("array", _bare_array),
    ("items", _items),
    ("data.items", _data_items),
    ("data", _data_array),
)


def raw_list_items(payload: Any) -> list[Mapping[str, Any]]:
    """Raw list entries from the first matching envelope (dicts only)."""
    for _, matcher in LIST_ENVELOPES:
        found = matcher(payload)
        if found is not None:
            return [entry for entry in found if isinstance(entry, Mapping)]
    return []


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _names(raw: Any) -> tuple[str, ...]:
    """Flatten category/country payloads into a tuple of names.

    Accepts a list of strings, a list of ``{"name": ...}`` objects, or the
    grouped mapping ``{"1": {"group": {...}, "list": [{"name": ...}]}}``.
    """
    if isinstance(raw, Mapping):
        out: list[str] = []
        for group in raw.values():
            out.extend(_names(dig(group, "list")))
        return tuple(out)

    if not isinstance(raw, list):
        return ()

    out = []
    for entry in raw:
        if isinstance(entry, str):
            name = entry
        else:
            name = first_present(dig(entry, "name"), dig(entry, "title"))
        if name:
            out.append(str(name))
    return tuple(out)


def _year(explicit: Any, categories: Any) -> int | None:
    year = to_int(explicit)
    if year is not None:
        return year
    return year_from_text(" ".join(_names(categories)))


def _kind(episode_count: Any) -> str:
    number = to_number(episode_count)
    return "series" if number is not None and number > 1 else "movie"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _meta(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    meta = {
        "current_episode": first_present(
            raw.get("current_episode"), raw.get("episode_current")
        ),
        "time": first_present(
            dig(raw, "modified", "time"), raw.get("updated_at"), raw.get("time")
        ),
        "quality": first_present(raw.get("quality")),
        "language": first_present(raw.get("lang"), raw.get("language")),
    }
    return MappingProxyType({k: v for k, v in meta.items() if v is not None})


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def brief_slug(raw: Mapping[str, Any]) -> str:
    """Slug of a raw list entry; ``""`` when it carries none."""
    return _text(
        first_present(
            raw.get("slug"), raw.get("id"), dig(raw, "movie", "slug"), raw.get("slug_name")
        )
    )


def normalize_brief_item(raw: Mapping[str, Any]) -> BriefItem:
    """Map one raw list entry onto a BriefItem."""
    slug = brief_slug(raw)
    poster = _text(
        first_present(
            raw.get("poster_url"), raw.get("thumb_url"), raw.get("poster"), raw.get("image")
        )
    )
    categories = first_present(raw.get("category"), raw.get("categories"))
    genres = _names(categories) if categories else None
    rating = to_number(dig(raw, "tmdb", "vote_average")) or None

    return BriefItem(
        id=f"{PLUGIN_ID}:{slug}",
        plugin_id=PLUGIN_ID,
        kind=_kind(first_present(raw.get("total_episodes"), raw.get("episode_total"))),
        title=_text(
            first_present(
                raw.get("name"),
                raw.get("title"),
                raw.get("origin_name"),
                raw.get("original_name"),
                raw.get("vn_name"),
            )
        ),
        year=_year(first_present(raw.get("year"), raw.get("publish_year")), raw.get("category")),
        poster=poster,
        backdrop=poster,
        genres=genres or None,
        rating=rating,
        description=strip_html(first_present(raw.get("description"), raw.get("content"))),
        meta=_meta(raw),
    )


def normalize_list(payload: Any) -> list[BriefItem]:
    """Normalize a search/browse payload into BriefItems."""
    return [normalize_brief_item(raw) for raw in raw_list_items(payload)]


def _locate_movie(container: Mapping[str, Any]) -> Mapping[str, Any] | None:
    for candidate in (container.get("movie"), container.get("item"), container):
        if not isinstance(candidate, Mapping):
            continue
        if first_present(
            candidate.get("name"),
            candidate.get("title"),
            candidate.get("origin_name"),
            candidate.get("original_name"),
            candidate.get("slug"),
            candidate.get("_id"),
            candidate.get("id"),
        ):
            return candidate
        # A wrapper key that is present but empty means no movie.
        if candidate is not container:
            return None
    return None


def _episode_item(raw: Any) -> EpisodeItem:
    if not isinstance(raw, Mapping):
        # Keep the slot so positional lookup stays aligned.
        return EpisodeItem(name="")
    return EpisodeItem(
        name=_text(raw.get("name")),
        m3u8=first_present(raw.get("m3u8"), raw.get("link_m3u8")) or None,
        embed=first_present(raw.get("embed"), raw.get("link_embed")) or None,
    )


def _episode_servers(raw: Any) -> tuple[EpisodeServer, ...]:
    if not isinstance(raw, list):
        return ()
    servers: list[EpisodeServer] = []
    for idx, server in enumerate(raw):
        if not isinstance(server, Mapping):
            servers.append(EpisodeServer(name=f"server-{idx}"))
            continue
        raw_items = first_present(server.get("items"), server.get("server_data"))
        items: list[EpisodeItem] = []
        if isinstance(raw_items, list):
            items = [_episode_item(entry) for entry in raw_items]
        servers.append(
            EpisodeServer(
                name=_text(first_present(server.get("server_name"), server.get("name")))
                or f"server-{idx}",
                items=tuple(items),
            )
        )
    return tuple(servers)


def normalize_detail(payload: Any, slug_hint: str | None = None) -> NormalizedDetail | None:
    """Normalize a detail payload; None when no movie record is present."""
    if not isinstance(payload, Mapping):
        return None

    data = payload.get("data")
    container = data if isinstance(data, Mapping) else payload
    movie = _locate_movie(container)
    if movie is None:
        return None

    episodes = first_present(container.get("episodes"), movie.get("episodes"))
    poster = _text(
        first_present(movie.get("poster_url"), movie.get("thumb_url"), movie.get("poster"))
    )
    categories = first_present(movie.get("category"), movie.get("categories"))
    alt_id = first_present(movie.get("_id"), movie.get("id"))

    record = MovieRecord(
        slug=_text(first_present(movie.get("slug"), slug_hint)),
        id=_text(alt_id) if alt_id is not None else None,
        name=_text(
            first_present(
                movie.get("name"),
                movie.get("title"),
                movie.get("origin_name"),
                movie.get("original_name"),
            )
        ),
        original_name=_text(
            first_present(movie.get("origin_name"), movie.get("original_name"), movie.get("name"))
        ),
        description=strip_html(first_present(movie.get("description"), movie.get("content"))),
        total_episodes=to_int(
            first_present(movie.get("total_episodes"), movie.get("episode_total")), 1
        ),
        poster_url=poster,
        thumb_url=poster,
        year=_year(
            first_present(
                movie.get("year"), movie.get("release_year"), movie.get("publish_year")
            ),
            categories,
        ),
        categories=_names(categories),
        countries=_names(first_present(movie.get("country"), movie.get("countries"))),
    )
    return NormalizedDetail(movie=record, episodes=_episode_servers(episodes))
