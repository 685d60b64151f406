"""
Shopify integration modules.

Modules:
    api_client - Admin REST API client (auth, pacing, 429 backoff)
    product_publisher - Product payloads, existence check, creation
    variant_images - Post-creation variant image linking
    collections - Smart/custom collection creation
    catalog_uploader - Upload sequencing and result aggregation
"""

from .api_client import ShopifyAPIClient, normalize_shop
from .catalog_uploader import CatalogUploader, ItemOutcome, UploadResult
from .collections import CollectionCreateResult, ShopifyCollectionCreator
from .product_publisher import ShopifyProductPublisher, apply_multiplier, build_product_payload
from .variant_images import AssociationResult, associate_variant_images, resolve_variant_image

__all__ = [
    # API Client
    'ShopifyAPIClient',
    'normalize_shop',
    # Products
    'ShopifyProductPublisher',
    'apply_multiplier',
    'build_product_payload',
    # Variant images
    'AssociationResult',
    'associate_variant_images',
    'resolve_variant_image',
    # Collections
    'CollectionCreateResult',
    'ShopifyCollectionCreator',
    # Upload
    'CatalogUploader',
    'ItemOutcome',
    'UploadResult',
]
