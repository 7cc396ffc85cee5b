"""Port for the upstream catalog JSON API."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CatalogApiPort(Protocol):
    """Async interface for the three catalog endpoints plus browse lists.

    Every method raises ``CatalogNetworkError`` on timeout, transport
    failure, invalid JSON, or a non-2xx status.
    """

    async def search(self, query: str) -> Any:
        """Raw JSON of the free-text search endpoint."""
        ...

    async def detail_by_slug(self, slug: str) -> Any:
        """Raw JSON of the slug-detail endpoint."""
        ...

    async def detail_by_id(self, catalog_id: str) -> Any:
        """Raw JSON of the id-detail endpoint."""
        ...

    async def browse(self, list_key: str, page: int = 1) -> Any:
        """Raw JSON of a browse list page."""
        ...
