"""
Shopify API Client

Client for the destination store's Admin REST API.
Handles authentication, request pacing, 429 backoff and error mapping.
"""

import logging
import threading
import time
from typing import Any, Dict, Optional

import requests

from ..common.constants import BASE_DELAY_SECONDS, MAX_RETRIES, SHOPIFY_API_VERSION
from ..common.fetch import fetch_with_retry

logger = logging.getLogger(__name__)


def normalize_shop(shop: str) -> str:
    """
    Reduce a store URL or domain to the bare shop name.

    "https://my-store.myshopify.com/admin" -> "my-store"
    """
    clean = (shop or "").strip().replace("https://", "").replace("http://", "")
    if ".myshopify.com" in clean:
        return clean.split(".myshopify.com")[0]
    return clean.rstrip("/").split("/")[0]


class ShopifyAPIClient:
    """
    Client for the Shopify Admin REST API.

    Handles:
    - Authentication (X-Shopify-Access-Token)
    - Request pacing (2 requests/second by default)
    - 429 backoff via fetch_with_retry
    - Non-2xx responses raised as HttpError

    Usage:
        client = ShopifyAPIClient(shop="my-store", access_token="shpat_xxx")
        result = client.rest_request("GET", "products.json?limit=250&page=1")
    """

    API_VERSION = SHOPIFY_API_VERSION

    def __init__(
        self,
        shop: str,
        access_token: str,
        api_version: str = SHOPIFY_API_VERSION,
        max_retries: int = MAX_RETRIES,
        base_delay: float = BASE_DELAY_SECONDS,
        timeout: int = 30,
    ):
        """
        Initialize the API client.

        Args:
            shop: Shop name (without .myshopify.com), full domain or URL
            access_token: Shopify Admin API access token
            api_version: Admin API version segment
            max_retries: 429 retries per request
            base_delay: Backoff base for 429 without Retry-After
            timeout: Request timeout in seconds
        """
        self.shop = normalize_shop(shop)
        self.access_token = access_token
        self.api_version = api_version
        self.base_url = f"https://{self.shop}.myshopify.com/admin/api/{api_version}"
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        })

        # Rate limiting
        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.5  # 2 req/sec
        # Shared by worker threads (e.g. the parallel collection lookup)
        self._rate_lock = threading.Lock()

    @classmethod
    def from_settings(cls, shop: str, access_token: str, settings: Dict[str, Any]) -> "ShopifyAPIClient":
        retry = settings.get("retry", {})
        shopify = settings.get("shopify", {})
        return cls(
            shop,
            access_token,
            api_version=shopify.get("api_version", SHOPIFY_API_VERSION),
            max_retries=retry.get("max_retries", MAX_RETRIES),
            base_delay=retry.get("base_delay", BASE_DELAY_SECONDS),
            timeout=shopify.get("timeout", 30),
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    @property
    def store_url(self) -> str:
        return f"https://{self.shop}.myshopify.com"

    def _rate_limit(self):
        """Space requests at least min_request_interval apart, across threads."""
        with self._rate_lock:
            elapsed = time.time() - self.last_request_time

            if elapsed < self.min_request_interval:
                time.sleep(self.min_request_interval - elapsed)

            self.last_request_time = time.time()
            self.requests_made += 1

    def rest_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
    ) -> Dict[str, Any]:
        """
        Make a REST API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint relative to the versioned base (e.g., "products.json")
            data: Request body for POST/PUT

        Returns:
            Response JSON ({} for an empty body)

        Raises:
            HttpError: Non-2xx response
            RateLimitExceeded: 429 persisted through every retry
            requests.exceptions.RequestException: Transport failure
        """
        if method not in ("GET", "POST", "PUT", "DELETE"):
            raise ValueError(f"Unsupported method: {method}")

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        self._rate_limit()

        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if data is not None:
            kwargs["json"] = data

        response = fetch_with_retry(
            self.session, url,
            method=method,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            **kwargs,
        )

        if not response.content:
            return {}
        return response.json()

    def test_connection(self) -> bool:
        """
        Test API connection by fetching shop info.

        Returns:
            True if connection successful
        """
        try:
            result = self.rest_request("GET", "shop.json")
        except Exception as e:
            logger.error("Connection test failed: %s", e)
            return False
        if "shop" in result:
            shop_name = result["shop"].get("name", "Unknown")
            logger.info("Connected to: %s", shop_name)
            return True
        return False
