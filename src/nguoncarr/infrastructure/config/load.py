"""Layered configuration loading: defaults < YAML < env < CLI."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

SECTIONS: frozenset[str] = frozenset({"api", "plugin", "logging", "cache"})
TOP_LEVEL_KEYS: tuple[str, ...] = ("app_name", "environment")

# flat key (env var / CLI flag) -> (section, key inside section)
FLAT_KEYS: dict[str, tuple[str, str]] = {
    "api_base_url": ("api", "base_url"),
    "api_timeout_seconds": ("api", "timeout_seconds"),
    "api_user_agent": ("api", "user_agent"),
    "preferred_stream_type": ("plugin", "preferred_stream_type"),
    "debug_log": ("plugin", "debug_log"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_http_capacity": ("cache", "http_capacity"),
    "cache_http_ttl_seconds": ("cache", "http_ttl_seconds"),
    "cache_detail_capacity": ("cache", "detail_capacity"),
    "cache_detail_ttl_seconds": ("cache", "detail_ttl_seconds"),
}


def merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively overlay *layer* onto *target* (mappings merge, scalars replace)."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merge_into(current, value)
        else:
            target[key] = deepcopy(value)
    return target


def to_sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring a layer into the sectioned shape.

    A layer may mix sectioned blocks (``{"api": {...}}``) with flat keys
    (``api_base_url``); flat keys are folded into their section and win
    over the block when both are given.  Unknown keys are dropped.
    """
    shaped: dict[str, Any] = {
        key: dict(layer[key])
        for key in SECTIONS
        if isinstance(layer.get(key), Mapping)
    }
    for key in TOP_LEVEL_KEYS:
        if key in layer:
            shaped[key] = layer[key]
    for flat, (section, inner) in FLAT_KEYS.items():
        if flat in layer:
            shaped.setdefault(section, {})[inner] = layer[flat]
    return shaped


def read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ValueError(f"{path}: top level must be a mapping, got {type(parsed).__name__}")
    return dict(parsed)


def _layers(
    config_path: Path | None,
    cli_overrides: Mapping[str, Any],
) -> Iterator[Mapping[str, Any]]:
    yield DEFAULT_CONFIG
    if config_path is not None:
        yield read_yaml(config_path)
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Build the validated AppConfig from every configuration layer.

    A ``.env`` file is loaded into the process environment first (existing
    variables win), so it takes part in the env layer.  Nothing is written
    to disk.

    Raises:
        FileNotFoundError: *config_path* or *dotenv_path* does not exist.
        ValueError: the YAML file is not a mapping.
        pydantic.ValidationError: the merged values are invalid.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        merge_into(merged, to_sectioned(layer))

    return AppConfig.model_validate(merged)
