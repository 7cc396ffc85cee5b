"""Composite identifier codec.

Format: ``<subject>::E<episode>::server=<index>``, optionally qualified
with a ``<namespace>:`` prefix (e.g. ``phim-nguonc:``).  The namespace
is only looked for inside the first ``::`` segment, so an unqualified
encoded id is never mistaken for a qualified one.
"""

from __future__ import annotations

import re

from nguoncarr.domain.entities.catalog import PLUGIN_ID, CompositeId

_SEPARATOR = "::"
_EPISODE_RE = re.compile(r"^E(\d+)$", re.IGNORECASE)
_SERVER_RE = re.compile(r"^server=(\d+)$", re.IGNORECASE)


def encode(subject: str, episode_number: int = 1, server_index: int = 0) -> str:
    """Pack subject, episode number, and server index into one string."""
    if not subject:
        raise ValueError("subject must not be empty")
    return f"{subject}{_SEPARATOR}E{int(episode_number)}{_SEPARATOR}server={int(server_index)}"


def qualify(value: str, namespace: str = PLUGIN_ID) -> str:
    """Prefix *value* with ``<namespace>:``."""
    return f"{namespace}:{value}"


def strip_namespace(value: str) -> str:
    """Drop a leading ``<namespace>:`` prefix if the head segment has one."""
    head, sep, rest = value.partition(_SEPARATOR)
    if ":" in head:
        head = head.split(":", 1)[1]
    return head + sep + rest


def decode(global_id: str | None) -> CompositeId:
    """Reconstruct a CompositeId. Never raises.

    Unknown trailing tokens are ignored; missing tokens leave the
    defaults ``episode_number=1`` and ``server_index=0``.
    """
    raw = strip_namespace(str(global_id or ""))
    subject, *tokens = raw.split(_SEPARATOR)

    episode_number = 1
    server_index = 0
    for token in tokens:
        episode_match = _EPISODE_RE.match(token)
        if episode_match:
            episode_number = int(episode_match.group(1)) or 1
            continue
        server_match = _SERVER_RE.match(token)
        if server_match:
            server_index = int(server_match.group(1))

    return CompositeId(
        subject=subject,
        episode_number=episode_number,
        server_index=server_index,
    )
