"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "nguoncarr",
    "environment": "dev",
    "api": {
        "base_url": "https://phim.nguonc.com",
        "timeout_seconds": 10.0,
        "user_agent": "nguoncarr/0.1.0",
    },
    "plugin": {
        "preferred_stream_type": "embed",
        "debug_log": True,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "http_capacity": 150,
        "http_ttl_seconds": 300.0,
        "detail_capacity": 400,
        "detail_ttl_seconds": 3600.0,
    },
}
