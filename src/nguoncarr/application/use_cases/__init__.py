from .catalog_plugin import CatalogPlugin

__all__ = ["CatalogPlugin"]
