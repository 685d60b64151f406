"""
Catalog Session

In-memory curation state for one user session: the scraped catalog, the
current selection, the upload-ready set and the upload history.
Nothing here is persisted.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ..models import Collection, Product, UploadHistory

logger = logging.getLogger(__name__)


class CatalogSession:
    """
    Session-scoped catalog store.

    Usage:
        session = CatalogSession()
        session.load_catalog("https://teststore.myshopify.com", products, collections)
        session.toggle_product("product-1")
        session.move_selected_to_ready()
        ...upload session.ready_products / session.ready_collections...
        session.record_upload("https://mine.myshopify.com")
    """

    def __init__(self):
        self.scrape_store_url = ""
        self.products: List[Product] = []
        self.collections: List[Collection] = []
        self.selected_product_ids: List[str] = []
        self.selected_collection_ids: List[str] = []
        self.ready_products: List[Product] = []
        self.ready_collections: List[Collection] = []
        self.history: List[UploadHistory] = []

    def load_catalog(self, store_url: str, products: List[Product], collections: List[Collection]) -> None:
        """Replace the scraped catalog. Selection is cleared; the ready set is kept."""
        self.scrape_store_url = store_url
        self.products = list(products)
        self.collections = list(collections)
        self.clear_selection()

    @staticmethod
    def _toggle(selected: List[str], item_id: str) -> None:
        if item_id in selected:
            selected.remove(item_id)
        else:
            selected.append(item_id)

    def toggle_product(self, product_id: str) -> None:
        self._toggle(self.selected_product_ids, product_id)

    def toggle_collection(self, collection_id: str) -> None:
        self._toggle(self.selected_collection_ids, collection_id)

    def clear_selection(self) -> None:
        self.selected_product_ids = []
        self.selected_collection_ids = []

    def move_selected_to_ready(self) -> None:
        """Append the selected products/collections to the ready set and clear the selection."""
        self.add_ready_products(p for p in self.products if p.id in self.selected_product_ids)
        self.add_ready_collections(c for c in self.collections if c.id in self.selected_collection_ids)
        self.clear_selection()

    def add_ready_products(self, products: Iterable[Product]) -> None:
        self.ready_products.extend(products)

    def add_ready_collections(self, collections: Iterable[Collection]) -> None:
        self.ready_collections.extend(collections)

    def remove_ready_product(self, product_id: str) -> None:
        self.ready_products = [p for p in self.ready_products if p.id != product_id]

    def remove_ready_collection(self, collection_id: str) -> None:
        self.ready_collections = [c for c in self.ready_collections if c.id != collection_id]

    def record_upload(self, my_store_url: str, now: Optional[datetime] = None) -> UploadHistory:
        """
        Add a history entry for an upload of the current ready set.

        Entries are kept newest first. Ids are "history-<epoch ms>", bumped
        by a millisecond when an entry already holds that id.
        """
        now = now or datetime.now(timezone.utc)
        stamp = int(now.timestamp() * 1000)
        taken = {h.id for h in self.history}
        while f"history-{stamp}" in taken:
            stamp += 1

        entry = UploadHistory(
            id=f"history-{stamp}",
            scrape_store_url=self.scrape_store_url,
            my_store_url=my_store_url,
            product_names=[p.name for p in self.ready_products],
            collection_names=[c.name for c in self.ready_collections],
            date_time=now.isoformat(),
        )
        self.history.insert(0, entry)
        logger.debug("Recorded upload %s (%d products, %d collections)",
                     entry.id, len(entry.product_names), len(entry.collection_names))
        return entry

    def remove_history(self, history_id: str) -> None:
        self.history = [h for h in self.history if h.id != history_id]
