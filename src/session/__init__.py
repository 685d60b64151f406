"""Session-scoped curation state."""

from .catalog_session import CatalogSession

__all__ = ['CatalogSession']
