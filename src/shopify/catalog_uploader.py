"""
Catalog Uploader

Sequences a publish request against the destination store:

1. Standalone products, skipping titles that already exist (their remote id is reused)
2. Each collection, skipped entirely when a same-titled collection exists;
   otherwise its products are uploaded the same way and the collection is
   created bound to the resulting product ids

Every item yields an ItemOutcome; the batch always runs to the end.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..models import Collection, Product
from .collections import ShopifyCollectionCreator
from .product_publisher import ShopifyProductPublisher

logger = logging.getLogger(__name__)

OK = "ok"
SKIPPED = "skipped"
ERROR = "error"


@dataclass
class ItemOutcome:
    """Result of publishing one product or collection."""
    kind: str                   # "product" or "collection"
    name: str
    status: str                 # OK, SKIPPED or ERROR
    remote_id: Optional[int] = None
    error: Optional[str] = None
    images_linked: int = 0      # variant-image bindings made after creation
    images_failed: int = 0


@dataclass
class UploadResult:
    """Aggregate of one upload request."""
    product_ids: List[int] = field(default_factory=list)
    collection_ids: List[int] = field(default_factory=list)
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @property
    def uploaded_products(self) -> int:
        return len(self.product_ids)

    @property
    def uploaded_collections(self) -> int:
        return len(self.collection_ids)

    @property
    def errors(self) -> List[str]:
        return [o.error for o in self.outcomes if o.status == ERROR and o.error]

    @property
    def images_linked(self) -> int:
        return sum(o.images_linked for o in self.outcomes)

    @property
    def images_failed(self) -> int:
        return sum(o.images_failed for o in self.outcomes)

    @property
    def partial_failure(self) -> bool:
        return bool(self.errors)

    @property
    def message(self) -> str:
        return (f"Successfully uploaded {self.uploaded_products} products "
                f"and {self.uploaded_collections} collections")

    def add_product_id(self, product_id: int) -> None:
        if product_id not in self.product_ids:
            self.product_ids.append(product_id)


class CatalogUploader:
    """
    Publishes curated products and collections, one write at a time.

    Usage:
        uploader = CatalogUploader(publisher, collection_creator)
        result = uploader.upload(products, collections)
        print(result.message, result.errors)
    """

    def __init__(self, publisher: ShopifyProductPublisher, collection_creator: ShopifyCollectionCreator):
        self.publisher = publisher
        self.collection_creator = collection_creator

    def _publish_product(self, product: Product, context: str = "") -> ItemOutcome:
        name = self.publisher.product_name(product)

        existing_id = self.publisher.find_existing_product(name)
        if existing_id is not None:
            logger.info("Product \"%s\" already exists (ID: %s), skipping...", name, existing_id)
            return ItemOutcome("product", name, SKIPPED, remote_id=existing_id)

        try:
            created = self.publisher.create_product(product)
        except Exception as e:
            message = f"Failed to upload product \"{product.name}\"{context}: {e}"
            logger.error(message)
            return ItemOutcome("product", name, ERROR, error=message)

        linked = self.publisher.link_variant_images(product, created)
        logger.info("Product \"%s\" uploaded successfully (ID: %s)", name, created.get("id"))
        return ItemOutcome("product", name, OK, remote_id=created.get("id"),
                           images_linked=linked.succeeded, images_failed=linked.failed)

    def upload_products(self, products: List[Product], result: UploadResult) -> None:
        if products:
            logger.info("Checking and uploading %d products...", len(products))
        for product in products:
            outcome = self._publish_product(product)
            result.outcomes.append(outcome)
            if outcome.remote_id is not None:
                result.add_product_id(outcome.remote_id)

    def _publish_collection(self, collection: Collection, result: UploadResult) -> ItemOutcome:
        if self.collection_creator.collection_exists(collection.name):
            logger.info("Collection \"%s\" already exists, skipping...", collection.name)
            return ItemOutcome("collection", collection.name, SKIPPED)

        logger.info("Checking and uploading %d products for collection \"%s\"...",
                    len(collection.products), collection.name)
        product_ids: List[int] = []
        for product in collection.products:
            outcome = self._publish_product(product, context=" in collection")
            result.outcomes.append(outcome)
            if outcome.remote_id is not None:
                product_ids.append(outcome.remote_id)
                result.add_product_id(outcome.remote_id)

        if not product_ids:
            return ItemOutcome("collection", collection.name, ERROR,
                               error=f"Collection \"{collection.name}\" has no products to upload")

        created = self.collection_creator.create_collection(collection, product_ids)
        logger.info("Collection \"%s\" uploaded successfully (%s)", collection.name, created.kind)
        return ItemOutcome("collection", collection.name, OK, remote_id=created.id)

    def upload_collections(self, collections: List[Collection], result: UploadResult) -> None:
        if collections:
            logger.info("Checking and uploading %d collections...", len(collections))
        for collection in collections:
            try:
                outcome = self._publish_collection(collection, result)
            except Exception as e:
                message = f"Failed to upload collection \"{collection.name}\": {e}"
                logger.error(message)
                outcome = ItemOutcome("collection", collection.name, ERROR, error=message)

            result.outcomes.append(outcome)
            if outcome.status == OK and outcome.remote_id is not None:
                result.collection_ids.append(outcome.remote_id)

    def upload(self, products: List[Product], collections: List[Collection]) -> UploadResult:
        """Upload standalone products first, then collections."""
        result = UploadResult()
        self.upload_products(products, result)
        self.upload_collections(collections, result)
        logger.info("%s (%d errors)", result.message, len(result.errors))
        return result
