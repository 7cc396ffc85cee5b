from .catalog import (
    PLUGIN_ID,
    BriefItem,
    BrowsePage,
    CacheEntry,
    CatalogError,
    CatalogItem,
    CatalogNetworkError,
    CatalogNotFoundError,
    CompositeId,
    ContentKind,
    EpisodeItem,
    EpisodeRef,
    EpisodeServer,
    HomePage,
    HomeSection,
    MethodNotFoundError,
    MovieRecord,
    NamedOption,
    NormalizedDetail,
    Season,
    Stream,
    StreamGroup,
    StreamType,
    StrategyFailure,
)

__all__ = [
    "PLUGIN_ID",
    "BriefItem",
    "BrowsePage",
    "CacheEntry",
    "CatalogError",
    "CatalogItem",
    "CatalogNetworkError",
    "CatalogNotFoundError",
    "CompositeId",
    "ContentKind",
    "EpisodeItem",
    "EpisodeRef",
    "EpisodeServer",
    "HomePage",
    "HomeSection",
    "MethodNotFoundError",
    "MovieRecord",
    "NamedOption",
    "NormalizedDetail",
    "Season",
    "Stream",
    "StreamGroup",
    "StreamType",
    "StrategyFailure",
]
