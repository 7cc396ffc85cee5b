"""Type conversion utilities for loosely typed upstream JSON."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_HTML_TAG_RE = re.compile(r"<[^>]+>")
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")


def to_int(raw: Any, default: int | None = None) -> int | None:
    """Convert a loose value to int, return *default* if invalid.

    Handles various formats:
        - None / "" → default
        - int → int (passthrough)
        - float → truncated int
        - "2024" → 2024
        - "2024-05-01" → 2024 (leading digits)
        - "abc" → default
    """
    if raw is None or isinstance(raw, bool):
        return default

    if isinstance(raw, int):
        return raw

    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else default

    if isinstance(raw, str):
        match = _LEADING_INT_RE.match(raw)
        if not match:
            return default
        return int(match.group(1))

    return default


def to_number(raw: Any) -> float | None:
    """Strict numeric conversion: numbers and fully numeric strings only."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        txt = raw.strip()
        if not txt:
            return None
        try:
            return float(txt)
        except ValueError:
            return None
    return None


def to_episode_number(raw: Any) -> int | None:
    """Integer value of an episode label like ``"05"``; None if not integral."""
    number = to_number(raw)
    if number is None or not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def first_present(*values: Any) -> Any:
    """Return the first value that is not None/empty, else None."""
    for value in values:
        if value is None or value == "" or value is False:
            continue
        if isinstance(value, (list, tuple, dict)) and not value:
            continue
        return value
    return None


def dig(data: Any, *path: str) -> Any:
    """Walk nested mappings; None as soon as a step is not a mapping."""
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def strip_html(text: Any) -> str:
    """Remove HTML tags and surrounding whitespace."""
    if text is None:
        return ""
    return _HTML_TAG_RE.sub("", str(text)).strip()


def year_from_text(text: str) -> int | None:
    """First 19xx/20xx token in *text*, if any."""
    match = _YEAR_RE.search(text or "")
    return int(match.group(0)) if match else None
