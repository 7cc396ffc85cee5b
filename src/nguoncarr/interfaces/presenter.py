"""JSON presenter for the host transport.

Turns domain value objects into plain dicts with the host's camelCase
keys.  ``None`` fields are omitted, the way the host's JSON drops
undefined members.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

_KEY_MAP: dict[str, str] = {
    "kind": "type",
    "plugin_id": "pluginId",
    "season_number": "seasonNumber",
    "episode_number": "episodeNumber",
    "total_pages": "totalPages",
}


def _camel(name: str) -> str:
    if name in _KEY_MAP:
        return _KEY_MAP[name]
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_host(value: Any) -> Any:
    """Recursively convert dataclasses/tuples into JSON-compatible data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in dataclasses.fields(value):
            field_value = getattr(value, f.name)
            if field_value is None:
                continue
            out[_camel(f.name)] = to_host(field_value)
        return out
    if isinstance(value, Mapping):
        return {str(k): to_host(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [to_host(v) for v in value]
    return value
