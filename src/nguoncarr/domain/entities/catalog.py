"""Domain entities for the nguonc catalog plugin.

Pure value objects with no framework dependencies and no I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, Literal, TypeVar

PLUGIN_ID = "phim-nguonc"

ContentKind = Literal["movie", "series"]
StreamType = Literal["m3u8", "embed"]

V = TypeVar("V")


@dataclass(frozen=True)
class CompositeId:
    """Title subject plus episode/server selection packed in one id.

    ``subject`` is either a slug or a numeric catalog id; which one is
    only known after resolution succeeds.
    """

    subject: str
    episode_number: int = 1
    server_index: int = 0


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A cached value stamped with its insertion time and freshness window."""

    value: V
    inserted_at: float  # monotonic seconds
    ttl: float  # seconds

    def is_fresh(self, now: float) -> bool:
        return now - self.inserted_at < self.ttl


@dataclass(frozen=True)
class BriefItem:
    """Catalog summary as shown in search results and home rows."""

    id: str  # "phim-nguonc:<slug>"
    kind: ContentKind
    title: str
    plugin_id: str = PLUGIN_ID
    year: int | None = None
    poster: str = ""
    backdrop: str = ""
    genres: tuple[str, ...] | None = None
    rating: float | None = None
    description: str = ""
    meta: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class EpisodeItem:
    """One episode entry on one server."""

    name: str
    m3u8: str | None = None
    embed: str | None = None


@dataclass(frozen=True)
class EpisodeServer:
    """A mirror source and its ordered episode list."""

    name: str
    items: tuple[EpisodeItem, ...] = ()


@dataclass(frozen=True)
class MovieRecord:
    slug: str
    id: str | None = None
    name: str = ""
    original_name: str = ""
    description: str = ""
    total_episodes: int = 1
    poster_url: str = ""
    thumb_url: str = ""
    year: int | None = None
    categories: tuple[str, ...] = ()
    countries: tuple[str, ...] = ()


@dataclass(frozen=True)
class NormalizedDetail:
    movie: MovieRecord
    episodes: tuple[EpisodeServer, ...] = ()


@dataclass(frozen=True)
class Stream:
    """A playable candidate URL. Produced fresh per request, never cached."""

    url: str
    quality: str
    type: StreamType | None = None


@dataclass(frozen=True)
class StreamGroup:
    name: str
    streams: tuple[Stream, ...] = ()


@dataclass(frozen=True)
class EpisodeRef:
    episode_number: int
    id: str
    title: str


@dataclass(frozen=True)
class Season:
    season_number: int
    episodes: tuple[EpisodeRef, ...] = ()


@dataclass(frozen=True)
class CatalogItem:
    """Full title view returned by ``getItem``."""

    id: str
    kind: ContentKind
    title: str
    plugin_id: str = PLUGIN_ID
    year: int | None = None
    overview: str = ""
    poster: str = ""
    backdrop: str = ""
    seasons: tuple[Season, ...] | None = None


@dataclass(frozen=True)
class HomeSection:
    title: str
    items: tuple[BriefItem, ...] = ()


@dataclass(frozen=True)
class HomePage:
    banner: BriefItem | None = None
    sections: tuple[HomeSection, ...] = ()


@dataclass(frozen=True)
class BrowsePage:
    items: tuple[BriefItem, ...] = ()
    page: int = 1
    total_pages: int | None = None


@dataclass(frozen=True)
class NamedOption:
    slug: str
    name: str


@dataclass(frozen=True)
class StrategyFailure:
    """Labeled diagnostic for one failed resolution strategy."""

    label: str
    error: str


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class CatalogError(Exception):
    """Base error for catalog domain/usecases."""


class CatalogNetworkError(CatalogError):
    """Timeout, transport failure, invalid JSON, or non-2xx upstream status."""

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status: int | None = None,
        body: str = "",
        timeout: bool = False,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body
        self.timeout = timeout


class CatalogNotFoundError(CatalogError):
    """Raised once every resolution strategy for a subject is exhausted."""

    def __init__(
        self,
        subject: str,
        attempts: tuple[StrategyFailure, ...] = (),
    ) -> None:
        super().__init__(f'Detail not found for "{subject}" by any method')
        self.subject = subject
        self.attempts = attempts


class MethodNotFoundError(CatalogError):
    """Raised by the invocation surface for unknown method names."""

    def __init__(self, method: str, available: list[str]) -> None:
        super().__init__(
            f"Method {method} not found. Available: {', '.join(available)}"
        )
        self.method = method
        self.available = available
