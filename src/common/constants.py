"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
Values here are the defaults; config/settings.yaml may override them.
"""

# Currency conversion
# Source stores price in JPY; the catalog is displayed in USD (~150 JPY = 1 USD)
JPY_TO_USD_RATE = 0.0067

# Shopify storefront pagination (public products.json / collections.json)
PAGE_SIZE = 250
PAGE_DELAY_SECONDS = 1.0

# Fetch-with-backoff
MAX_RETRIES = 3
BASE_DELAY_SECONDS = 1.0

# Catalog transformation
DESCRIPTION_LIMIT = 500
NO_DESCRIPTION = "No description available"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/300"

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

# Admin API
SHOPIFY_API_VERSION = "2024-01"
EXISTENCE_CHECK_DELAY_SECONDS = 0.2
COLLECTION_LOOKUP_LIMIT = 5000

DEFAULT_SETTINGS = {
    "currency": {
        "source": "JPY",
        "target": "USD",
        "rate": JPY_TO_USD_RATE,
    },
    "scraper": {
        "page_size": PAGE_SIZE,
        "page_delay": PAGE_DELAY_SECONDS,
        "max_workers": 8,
        "user_agent": USER_AGENT,
        "placeholder_image": PLACEHOLDER_IMAGE,
        "description_limit": DESCRIPTION_LIMIT,
        "no_description": NO_DESCRIPTION,
    },
    "retry": {
        "max_retries": MAX_RETRIES,
        "base_delay": BASE_DELAY_SECONDS,
    },
    "shopify": {
        "api_version": SHOPIFY_API_VERSION,
        "existence_check_delay": EXISTENCE_CHECK_DELAY_SECONDS,
        "collection_lookup_limit": COLLECTION_LOOKUP_LIMIT,
        "timeout": 30,
    },
}
