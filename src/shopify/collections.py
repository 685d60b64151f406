"""
Shopify Collection Creator

Creates collections on the destination store for copied catalog collections.

Strategy: a smart collection with rule "id equals <product ids>" first; if
that is rejected, a custom (manual) collection with each product attached
through collects.json.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..common.constants import COLLECTION_LOOKUP_LIMIT
from ..common.errors import HttpError
from ..models import Collection
from .api_client import ShopifyAPIClient

logger = logging.getLogger(__name__)

SMART = "smart"
MANUAL = "manual"


@dataclass
class CollectionCreateResult:
    """Outcome of create_collection, tagged by the strategy that succeeded."""
    kind: str                       # SMART or MANUAL
    collection: Dict[str, Any]
    attached: int = 0               # products attached (manual only)
    attach_failed: int = 0

    @property
    def id(self) -> Optional[int]:
        return self.collection.get("id")


class ShopifyCollectionCreator:
    """
    Creates collections in Shopify via Admin API.

    Usage:
        creator = ShopifyCollectionCreator(client)
        if not creator.collection_exists("Summer"):
            result = creator.create_collection(collection, [101, 102])
            print(result.kind, result.id)
    """

    def __init__(self, client: ShopifyAPIClient, lookup_limit: int = COLLECTION_LOOKUP_LIMIT):
        """
        Initialize the creator.

        Args:
            client: Admin API client for the destination store
            lookup_limit: Page size used when listing existing collections
        """
        self.client = client
        self.lookup_limit = lookup_limit

    def _collection_titles(self, resource: str) -> List[str]:
        try:
            result = self.client.rest_request("GET", f"{resource}.json?limit={self.lookup_limit}")
        except Exception as e:
            logger.warning("Could not list %s: %s", resource, e)
            return []
        return [c.get("title", "") for c in result.get(resource, [])]

    def collection_exists(self, title: str) -> bool:
        """Check smart and custom collections (fetched in parallel) for an exact title match."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            smart, custom = executor.map(self._collection_titles, ["smart_collections", "custom_collections"])
        return title in smart or title in custom

    @staticmethod
    def _base_payload(collection: Collection) -> Dict[str, Any]:
        return {
            "title": collection.name,
            "body_html": collection.description,
            "image": {"src": collection.image} if collection.image else None,
        }

    def create_smart_collection(self, collection: Collection, product_ids: List[int]) -> Dict[str, Any]:
        """
        Create a smart collection with a single id rule.

        Raises:
            HttpError, RateLimitExceeded, requests.exceptions.RequestException
        """
        payload = self._base_payload(collection)
        payload["rules"] = [
            {
                "column": "id",
                "relation": "equals",
                "condition": ",".join(str(pid) for pid in product_ids),
            }
        ]
        result = self.client.rest_request("POST", "smart_collections.json", {"smart_collection": payload})
        created = result.get("smart_collection")
        if not created:
            raise ValueError("Smart collection missing from create response")
        return created

    def add_product_to_collection(self, collection_id: int, product_id: int) -> bool:
        """
        Attach a product to a custom collection.

        A 422 (already a member) counts as success. Never raises.
        """
        data = {"collect": {"product_id": product_id, "collection_id": collection_id}}
        try:
            self.client.rest_request("POST", "collects.json", data)
        except HttpError as e:
            if e.status_code == 422:
                return True
            logger.error("Failed to add product %s to collection %s: %s", product_id, collection_id, e)
            return False
        except Exception as e:
            logger.error("Error adding product %s to collection %s: %s", product_id, collection_id, e)
            return False
        return True

    def create_custom_collection(self, collection: Collection, product_ids: List[int]) -> CollectionCreateResult:
        """
        Create a custom collection and attach each product one at a time.

        Raises:
            HttpError, RateLimitExceeded, requests.exceptions.RequestException
            when the collection itself cannot be created
        """
        result = self.client.rest_request(
            "POST", "custom_collections.json", {"custom_collection": self._base_payload(collection)}
        )
        created = result.get("custom_collection")
        if not created:
            raise ValueError("Custom collection missing from create response")

        outcome = CollectionCreateResult(kind=MANUAL, collection=created)
        for product_id in product_ids:
            if self.add_product_to_collection(created["id"], product_id):
                outcome.attached += 1
            else:
                outcome.attach_failed += 1
        return outcome

    def _try_smart_collection(self, collection: Collection, product_ids: List[int]) -> Optional[Dict[str, Any]]:
        try:
            return self.create_smart_collection(collection, product_ids)
        except Exception as e:
            logger.warning("Smart collection rejected for %s: %s", collection.name, e)
            return None

    def create_collection(self, collection: Collection, product_ids: List[int]) -> CollectionCreateResult:
        """
        Create a collection bound to `product_ids`.

        Tries a smart collection first; when it is rejected, creates a custom
        collection instead. Raises only if the custom collection fails too.
        """
        created = self._try_smart_collection(collection, product_ids)
        if created is not None:
            logger.info("Created smart collection: %s (ID: %s)", collection.name, created.get("id"))
            return CollectionCreateResult(kind=SMART, collection=created)

        outcome = self.create_custom_collection(collection, product_ids)
        logger.info("Created custom collection: %s (ID: %s, %d products attached)",
                    collection.name, outcome.id, outcome.attached)
        return outcome
