"""Catalog reader factory.

Provides get_catalog() / set_catalog() to swap implementations:
- InMemoryCatalog for development and testing (default)
- any CatalogReader backed by the product service in production
"""

from catalogue.reader.fake_adapter import InMemoryCatalog
from catalogue.reader.port import CatalogReader, ProductSnapshot

__all__ = ["CatalogReader", "InMemoryCatalog", "ProductSnapshot", "get_catalog", "reset_catalog", "set_catalog"]

_current_catalog: CatalogReader | None = None


def get_catalog() -> CatalogReader:
    """Return the current catalog reader. Defaults to an empty InMemoryCatalog."""
    global _current_catalog
    if _current_catalog is None:
        _current_catalog = InMemoryCatalog()
    return _current_catalog


def set_catalog(catalog: CatalogReader) -> None:
    """Override the active catalog reader (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the default catalog reader."""
    global _current_catalog
    _current_catalog = None
