"""
Data models for the catalog pipeline.

This module contains pure data classes with no business logic.
"""

from .product import (
    Collection,
    Product,
    ProductImage,
    ProductOption,
    ProductVariant,
    UploadHistory,
)

__all__ = [
    'ProductImage',
    'ProductOption',
    'ProductVariant',
    'Product',
    'Collection',
    'UploadHistory',
]
