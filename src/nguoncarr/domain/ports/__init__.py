from .cache import CachePort
from .catalog_api import CatalogApiPort
from .random_source import RandomSourcePort

__all__ = [
    "CachePort",
    "CatalogApiPort",
    "RandomSourcePort",
]
