from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from nguoncarr.infrastructure.config import AppConfig, load_config
from nguoncarr.infrastructure.logging.setup import configure_logging
from nguoncarr.interfaces.composition import build_plugin
from nguoncarr.interfaces.dispatcher import Dispatcher

# argparse dest -> flat config key
_OVERRIDE_FLAGS: dict[str, str] = {
    "log_level": "log_level",
    "log_format": "log_format",
    "stream_type": "preferred_stream_type",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nguoncarr",
        description="Call one catalog plugin method and print the JSON response.",
    )
    parser.add_argument("method", help="getItem, getStreams, play, search, ...")
    parser.add_argument(
        "args",
        nargs="*",
        metavar="ARG",
        help="Method argument; JSON if it parses, a plain string otherwise.",
    )

    files = parser.add_argument_group("configuration files")
    files.add_argument("--config", type=Path, help="YAML config file.")
    files.add_argument("--dotenv", type=Path, help=".env file with NGUONCARR_* variables.")

    overrides = parser.add_argument_group("overrides (beat YAML and env)")
    overrides.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    overrides.add_argument("--log-format", choices=["json", "console"])
    overrides.add_argument(
        "--preferred-stream-type", dest="stream_type", choices=["embed", "m3u8"]
    )
    return parser


def _cli_overrides(ns: argparse.Namespace) -> dict[str, Any]:
    return {
        key: getattr(ns, dest)
        for dest, key in _OVERRIDE_FLAGS.items()
        if getattr(ns, dest) is not None
    }


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


async def _invoke(config: AppConfig, method: str, args: list[Any]) -> dict[str, Any]:
    async with build_plugin(config) as plugin:
        request = {"id": 1, "method": method, "payload": args}
        return await Dispatcher(plugin).handle(request)


def start(argv: Iterable[str] | None = None) -> int:
    """Entrypoint: exit code 1 when the response carries an error."""
    ns = _build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))

    config = load_config(
        config_path=ns.config,
        dotenv_path=ns.dotenv,
        cli_overrides=_cli_overrides(ns),
    )
    configure_logging(config)

    payload = [_parse_value(raw) for raw in ns.args]
    response = asyncio.run(_invoke(config, ns.method, payload))
    sys.stdout.write(json.dumps(response, ensure_ascii=False, indent=2) + "\n")
    return 0 if "result" in response else 1


if __name__ == "__main__":
    raise SystemExit(start())
