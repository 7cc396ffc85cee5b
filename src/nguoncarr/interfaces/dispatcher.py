"""Invocation surface: host method calls → CatalogPlugin operations.

A request carries ``id``, ``method`` and ``payload``.  A list payload is
spread as positional arguments, any other non-null payload is passed as
the single argument, and a missing payload means no arguments.  The
response carries the same ``id`` and either ``result`` or ``error``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import structlog

from nguoncarr.application.use_cases.catalog_plugin import CatalogPlugin
from nguoncarr.domain.entities.catalog import MethodNotFoundError
from nguoncarr.infrastructure.common.converters import to_int
from nguoncarr.interfaces.presenter import to_host

log = structlog.get_logger(__name__)

Handler = Callable[..., Awaitable[Any]]


def _options(args: tuple[Any, ...]) -> Mapping[str, Any]:
    if args and isinstance(args[0], Mapping):
        return args[0]
    return {}


def _payload_args(payload: Any) -> tuple[Any, ...]:
    if isinstance(payload, list):
        return tuple(payload)
    if payload is None:
        return ()
    return (payload,)


class Dispatcher:
    """Route host calls by method name.

    Unknown names raise ``MethodNotFoundError`` listing the valid ones;
    ``handle`` reports it (like any other failure) as the error string.
    """

    def __init__(self, plugin: CatalogPlugin) -> None:
        self._plugin = plugin
        self._methods: dict[str, Handler] = {
            "search": self._search,
            "getItem": self._get_item,
            "getStreams": self._get_streams,
            "play": self._play,
            "discover": self._discover,
            "getHome": self._get_home,
            "browse": self._browse,
            "listGenres": self._list_genres,
            "listCountries": self._list_countries,
            "listYears": self._list_years,
            "listTypes": self._list_types,
        }

    @property
    def method_names(self) -> list[str]:
        return list(self._methods)

    # ------------------------------------------------------------------
    # Argument adapters
    # ------------------------------------------------------------------

    async def _search(self, query: Any = "", *_: Any) -> Any:
        return await self._plugin.search("" if query is None else str(query))

    async def _get_item(self, global_id: Any = "", *_: Any) -> Any:
        return await self._plugin.get_item(str(global_id or ""))

    async def _get_streams(self, global_id: Any = "", *_: Any) -> Any:
        servers = await self._plugin.get_streams(str(global_id or ""))
        return {"servers": servers}

    async def _play(self, *args: Any) -> Any:
        opts = _options(args)
        if opts:
            global_id = opts.get("globalId")
            server_index = to_int(opts.get("serverIndex"))
            episode_index = to_int(opts.get("episodeIndex"))
        else:
            global_id = args[0] if args else None
            server_index = to_int(args[1]) if len(args) > 1 else None
            episode_index = to_int(args[2]) if len(args) > 2 else None
        return await self._plugin.play(
            str(global_id or ""),
            server_index=server_index,
            episode_index=episode_index,
        )

    async def _discover(self, *args: Any) -> Any:
        opts = _options(args)
        return await self._plugin.discover(
            type=opts.get("type"),
            genre=opts.get("genre"),
            limit=to_int(opts.get("limit"), 20),
        )

    async def _get_home(self, *args: Any) -> Any:
        opts = _options(args)
        return await self._plugin.get_home(
            rows=to_int(opts.get("rows"), 3),
            limit=to_int(opts.get("limit"), 14),
        )

    async def _browse(self, *args: Any) -> Any:
        opts = _options(args)
        if opts:
            list_key, page = opts.get("key") or opts.get("type"), opts.get("page")
        else:
            list_key = args[0] if args else None
            page = args[1] if len(args) > 1 else None
        return await self._plugin.browse(str(list_key or ""), to_int(page, 1))

    async def _list_genres(self, *_: Any) -> Any:
        return self._plugin.list_genres()

    async def _list_countries(self, *_: Any) -> Any:
        return self._plugin.list_countries()

    async def _list_years(self, *args: Any) -> Any:
        opts = _options(args)
        return self._plugin.list_years(
            start=to_int(opts.get("from"), 2010),
            end=to_int(opts.get("to")),
        )

    async def _list_types(self, *_: Any) -> Any:
        return self._plugin.list_types()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def call(self, method: str, args: tuple[Any, ...] = ()) -> Any:
        """Invoke *method* and return the host-shaped result.

        Raises:
            MethodNotFoundError: unknown *method*.
        """
        handler = self._methods.get(method)
        if handler is None:
            raise MethodNotFoundError(method, self.method_names)
        return to_host(await handler(*args))

    async def handle(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Answer one host request; failures become ``{"id", "error"}``."""
        request_id = request.get("id")
        method = str(request.get("method") or "")
        args = _payload_args(request.get("payload"))

        try:
            result = await self.call(method, args)
        except Exception as exc:
            log.warning("dispatch_error", method=method, error=str(exc))
            return {"id": request_id, "error": str(exc)}

        log.debug("dispatch_result", method=method)
        return {"id": request_id, "result": result}
