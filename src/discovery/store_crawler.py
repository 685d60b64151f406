"""
Store Crawler

Scrapes a Shopify storefront's public JSON endpoints:
    /products.json
    /collections.json
    /collections/<handle>/products.json

Every endpoint is paginated with limit=250&page=N until a short page.
Products and collections are crawled in parallel; each collection's product
list is crawled in parallel with the other collections but page by page
within a collection.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests

from ..common.constants import (
    BASE_DELAY_SECONDS,
    MAX_RETRIES,
    PAGE_DELAY_SECONDS,
    PAGE_SIZE,
    USER_AGENT,
)
from ..common.errors import FetchError, HttpError, RateLimitExceeded, ScrapeError
from ..common.fetch import fetch_with_retry
from ..extraction.catalog_transformer import CatalogTransformer
from ..models import Collection, Product

logger = logging.getLogger(__name__)

MYSHOPIFY_SUFFIX = ".myshopify.com"


def resolve_shop_name(store_url: str) -> Optional[str]:
    """
    Resolve a user-supplied store identifier to a shop name.

    "https://teststore.myshopify.com/" -> "teststore"
    "teststore"                        -> "teststore"
    "shop.example.com"                 -> "shop.example.com"

    Returns:
        Shop name, or None when nothing usable is left
    """
    if not store_url or not isinstance(store_url, str):
        return None

    clean = store_url.strip()
    for scheme in ("https://", "http://"):
        if clean.lower().startswith(scheme):
            clean = clean[len(scheme):]
            break
    if clean.endswith("/"):
        clean = clean[:-1]

    if MYSHOPIFY_SUFFIX in clean:
        clean = clean.split(MYSHOPIFY_SUFFIX)[0]

    return clean or None


def shop_domain(shop: str) -> str:
    """Host to request: bare shop names get .myshopify.com, custom domains are used as is."""
    return shop if "." in shop else f"{shop}{MYSHOPIFY_SUFFIX}"


@dataclass
class ScrapeResult:
    """Normalized catalog of one source store."""
    shop: str
    products: List[Product] = field(default_factory=list)
    collections: List[Collection] = field(default_factory=list)

    @property
    def store_url(self) -> str:
        return f"https://{shop_domain(self.shop)}"


class StoreCrawler:
    """
    Crawls a source store and returns its normalized catalog.

    Usage:
        with StoreCrawler("teststore") as crawler:
            result = crawler.scrape()
            print(len(result.products), len(result.collections))
    """

    def __init__(
        self,
        shop: str,
        transformer: Optional[CatalogTransformer] = None,
        page_size: int = PAGE_SIZE,
        page_delay: float = PAGE_DELAY_SECONDS,
        max_retries: int = MAX_RETRIES,
        base_delay: float = BASE_DELAY_SECONDS,
        max_workers: int = 8,
        user_agent: str = USER_AGENT,
        timeout: int = 30,
    ):
        """
        Initialize the crawler.

        Args:
            shop: Store identifier (shop name, myshopify domain or URL)
            transformer: Maps raw records to models (default rate/placeholder if None)
            page_size: Items per page; a shorter page ends pagination
            page_delay: Politeness delay between pages, in seconds
            max_retries: 429 retries per request
            base_delay: Backoff base for 429 without Retry-After
            max_workers: Upper bound on parallel collection crawls
            user_agent: User-Agent header for storefront requests
            timeout: Per-request timeout in seconds
        """
        resolved = resolve_shop_name(shop)
        if not resolved:
            raise ValueError(f"Invalid store identifier: {shop!r}")

        self.shop = resolved
        self.domain = shop_domain(resolved)
        self.transformer = transformer or CatalogTransformer()
        self.page_size = page_size
        self.page_delay = page_delay
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_workers = max_workers
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json",
        })

    @classmethod
    def from_settings(cls, shop: str, settings: Dict[str, Any]) -> "StoreCrawler":
        scraper = settings.get("scraper", {})
        retry = settings.get("retry", {})
        return cls(
            shop,
            transformer=CatalogTransformer.from_settings(settings),
            page_size=scraper.get("page_size", PAGE_SIZE),
            page_delay=scraper.get("page_delay", PAGE_DELAY_SECONDS),
            max_retries=retry.get("max_retries", MAX_RETRIES),
            base_delay=retry.get("base_delay", BASE_DELAY_SECONDS),
            max_workers=scraper.get("max_workers", 8),
            user_agent=scraper.get("user_agent", USER_AGENT),
            timeout=settings.get("shopify", {}).get("timeout", 30),
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _get_page(self, path: str, key: str, page: int) -> List[Dict[str, Any]]:
        url = f"https://{self.domain}{path}?limit={self.page_size}&page={page}"
        logger.debug("GET %s", url)
        response = fetch_with_retry(
            self.session, url,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            timeout=self.timeout,
        )
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected JSON from {path} page {page}: {type(payload).__name__}")
        return payload.get(key) or []

    def _paginate(
        self,
        path: str,
        key: str,
        collected: List[Dict[str, Any]],
        label: str,
    ) -> List[Dict[str, Any]]:
        """
        Fetch pages until one comes back short, appending into `collected`.

        `collected` is filled in place so callers that tolerate a failure
        can still return what arrived before it.
        """
        page = 1
        while True:
            items = self._get_page(path, key, page)
            collected.extend(items)
            logger.debug("Fetched %d %s from page %d (total: %d)", len(items), label, page, len(collected))

            if len(items) < self.page_size:
                return collected

            page += 1
            time.sleep(self.page_delay)

    def fetch_products(self) -> List[Dict[str, Any]]:
        """Fetch every product record. Any failure is fatal."""
        collected: List[Dict[str, Any]] = []
        try:
            self._paginate("/products.json", "products", collected, "products")
        except Exception as e:
            raise ScrapeError(f"Error fetching products: {e}") from e
        logger.info("Total products fetched: %d", len(collected))
        return collected

    def fetch_collections(self) -> List[Dict[str, Any]]:
        """
        Fetch every collection record.

        A 403 (collection listing disabled) or a 429 that outlived its retries
        ends the crawl with what was collected; other failures are fatal.
        """
        collected: List[Dict[str, Any]] = []
        try:
            self._paginate("/collections.json", "collections", collected, "collections")
        except HttpError as e:
            if e.status_code != 403:
                raise ScrapeError(f"Error fetching collections: {e}") from e
            logger.info("Collections endpoint returned 403, continuing without collections")
        except RateLimitExceeded:
            logger.warning("Collections endpoint rate limited after retries, continuing with %d collections",
                           len(collected))
        except Exception as e:
            raise ScrapeError(f"Error fetching collections: {e}") from e

        logger.info("Total collections fetched: %d", len(collected))
        return collected

    def fetch_collection_products(self, handle: str) -> List[Dict[str, Any]]:
        """Fetch one collection's products; on failure return what arrived so far."""
        collected: List[Dict[str, Any]] = []
        try:
            self._paginate(f"/collections/{handle}/products.json", "products", collected,
                           f"products of {handle}")
        except (FetchError, requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Stopped fetching products for collection %s after %d: %s",
                           handle, len(collected), e)
        return collected

    def _build_collection(self, raw: Dict[str, Any]) -> Collection:
        raw_products = self.fetch_collection_products(raw.get("handle") or "")
        return self.transformer.transform_collection(raw, raw_products)

    def build_collections(self, raw_collections: List[Dict[str, Any]]) -> List[Collection]:
        """Crawl and transform each collection's products, preserving collection order."""
        if not raw_collections:
            return []
        workers = max(1, min(self.max_workers, len(raw_collections)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._build_collection, raw_collections))

    def _run_parallel(self, *tasks: Callable[[], Any]) -> List[Any]:
        with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
            futures = [executor.submit(task) for task in tasks]
            return [future.result() for future in futures]

    def scrape(self) -> ScrapeResult:
        """
        Crawl the full catalog.

        Returns:
            ScrapeResult with transformed products and collections

        Raises:
            ScrapeError: Products crawl failed, or collections failed fatally
        """
        logger.info("Fetching products and collections for: %s", self.domain)

        raw_products, raw_collections = self._run_parallel(
            self.fetch_products,
            self.fetch_collections,
        )

        products = self.transformer.transform_products(raw_products)
        logger.info("Transforming %d collections...", len(raw_collections))
        collections = self.build_collections(raw_collections)

        logger.info("Scraped %d products and %d collections from %s",
                    len(products), len(collections), self.domain)
        return ScrapeResult(shop=self.shop, products=products, collections=collections)
