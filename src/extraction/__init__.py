"""
Catalog extraction.

Modules:
    catalog_transformer - Storefront JSON records -> Product / Collection models
"""

from .catalog_transformer import CatalogTransformer

__all__ = ['CatalogTransformer']
