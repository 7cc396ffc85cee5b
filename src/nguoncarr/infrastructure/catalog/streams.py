"""Stream extraction and preference for a resolved title.

The preferred server contributes its embed player first and its HLS
playlist second.  Every other server contributes its HLS playlist as a
``server-<n>`` mirror.  Duplicates are dropped by (url, quality).
"""

from __future__ import annotations

from collections.abc import Sequence

from nguoncarr.domain.entities.catalog import (
    EpisodeItem,
    EpisodeServer,
    NormalizedDetail,
    Stream,
    StreamType,
)
from nguoncarr.infrastructure.common.converters import to_episode_number


def find_episode(server: EpisodeServer, episode_number: int) -> EpisodeItem | None:
    """Match by numeric episode name, else fall back to position."""
    for item in server.items:
        if to_episode_number(item.name) == episode_number:
            return item
    idx = episode_number - 1
    if 0 <= idx < len(server.items):
        return server.items[idx]
    return None


def _episode_on(
    servers: Sequence[EpisodeServer], server_index: int, episode_number: int
) -> EpisodeItem | None:
    if not 0 <= server_index < len(servers):
        return None
    return find_episode(servers[server_index], episode_number)


def dedupe_streams(streams: Sequence[Stream]) -> list[Stream]:
    """Drop repeated (url, quality) pairs, keeping first occurrences in order."""
    seen: set[tuple[str, str]] = set()
    unique: list[Stream] = []
    for stream in streams:
        key = (stream.url, stream.quality)
        if key in seen:
            continue
        seen.add(key)
        unique.append(stream)
    return unique


def extract_streams(
    detail: NormalizedDetail,
    episode_number: int,
    preferred_server_index: int = 0,
) -> list[Stream]:
    """Build the deduplicated candidate list for one episode."""
    servers = detail.episodes
    candidates: list[Stream] = []

    current = _episode_on(servers, preferred_server_index, episode_number)
    if current is not None:
        if current.embed:
            candidates.append(Stream(url=current.embed, quality="HD", type="embed"))
        if current.m3u8:
            candidates.append(Stream(url=current.m3u8, quality="auto", type="m3u8"))

    for idx in range(len(servers)):
        if idx == preferred_server_index:
            continue
        mirror = find_episode(servers[idx], episode_number)
        if mirror is not None and mirror.m3u8:
            candidates.append(Stream(url=mirror.m3u8, quality=f"server-{idx}"))

    return dedupe_streams(candidates)


def choose_stream(
    streams: Sequence[Stream], preferred_type: StreamType | None
) -> Stream | None:
    """First stream of the preferred type, else the first stream."""
    if not streams:
        return None
    for stream in streams:
        if stream.type == preferred_type:
            return stream
    return streams[0]
