"""
Pipeline Orchestrator

Entry points behind the two HTTP endpoints:

    scrape  - resolve store -> crawl -> transform
    upload  - existence checks -> create products/collections

Both return a PipelineResponse (HTTP status + JSON body) and never raise.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..common.config_loader import load_settings
from ..common.errors import CertificateError, ValidationError, classify_transport_error
from ..discovery.store_crawler import StoreCrawler, resolve_shop_name
from ..models import Collection, Product
from ..shopify.api_client import ShopifyAPIClient
from ..shopify.catalog_uploader import CatalogUploader, UploadResult
from ..shopify.collections import ShopifyCollectionCreator
from ..shopify.product_publisher import ShopifyProductPublisher

logger = logging.getLogger(__name__)

CERTIFICATE_ERROR_MESSAGE = (
    "SSL Certificate Error: The SSL certificate validation failed. This often happens "
    "if your system clock is incorrect. Please check your system date and time settings "
    "and ensure they are correct. If the issue persists, the target store may have an "
    "expired certificate."
)
DEFAULT_SCRAPE_ERROR = (
    "Failed to scrape store. Please check if the store URL is valid and publicly accessible."
)
DEFAULT_UPLOAD_ERROR = "Failed to upload products/collections"
MAX_LISTED_ERRORS = 5


@dataclass
class PipelineResponse:
    """HTTP status code and JSON body for an endpoint."""
    status_code: int
    body: Dict[str, Any]


def _failure(status_code: int, message: str) -> PipelineResponse:
    return PipelineResponse(status_code, {"success": False, "error": message})


def summarize_errors(errors: List[str], limit: int = MAX_LISTED_ERRORS) -> List[str]:
    """First `limit` errors, plus an overflow line when there are more."""
    lines = list(errors[:limit])
    if len(errors) > limit:
        lines.append(f"... and {len(errors) - limit} more")
    return lines


def validate_store_url(store_url: Optional[str]) -> str:
    """Resolve the scrape target or raise ValidationError."""
    if not store_url:
        raise ValidationError("Store URL is required")
    shop = resolve_shop_name(store_url)
    if not shop:
        raise ValidationError(
            'Invalid store URL format. Please use format like "store.myshopify.com" or just "store"'
        )
    return shop


def validate_upload_target(store_url: Optional[str], admin_token: Optional[str]) -> None:
    if not store_url or not admin_token:
        raise ValidationError("Store URL and Admin Token are required")


def scrape_error_message(exc: BaseException) -> str:
    """User-facing message for a failed scrape; certificate failures get a dedicated one."""
    if isinstance(classify_transport_error(exc), CertificateError):
        return CERTIFICATE_ERROR_MESSAGE
    return str(exc) or DEFAULT_SCRAPE_ERROR


def scrape_store(
    store_url: Optional[str],
    settings: Optional[Dict[str, Any]] = None,
    crawler_factory: Callable[[str, Dict[str, Any]], StoreCrawler] = StoreCrawler.from_settings,
) -> PipelineResponse:
    """
    Scrape a source store.

    Args:
        store_url: Store identifier as typed by the user
        settings: Loaded settings (load_settings() if None)
        crawler_factory: Builds the crawler for a shop name

    Returns:
        200 {success, products, collections, storeUrl}
        400 for a missing/unusable identifier, 500 for crawl failures
    """
    try:
        shop = validate_store_url(store_url)
    except ValidationError as e:
        return _failure(400, str(e))

    settings = settings if settings is not None else load_settings()
    logger.info("Scraping store: %s", shop)

    try:
        with crawler_factory(shop, settings) as crawler:
            result = crawler.scrape()
    except Exception as e:
        logger.error("Scraping error: %s", e)
        return _failure(500, scrape_error_message(e))

    return PipelineResponse(200, {
        "success": True,
        "products": [p.to_dict() for p in result.products],
        "collections": [c.to_dict() for c in result.collections],
        "storeUrl": result.store_url,
    })


def parse_multiplier(value: Any) -> float:
    """Price multiplier from request input; missing, zero or invalid means 1."""
    try:
        multiplier = float(value)
    except (TypeError, ValueError):
        return 1.0
    if multiplier != multiplier or multiplier == 0:
        return 1.0
    return multiplier


def run_upload(
    client: ShopifyAPIClient,
    products: List[Product],
    collections: List[Collection],
    multiplier: float = 1.0,
    prefix_keyword: str = "",
    description_prefix: str = "",
    settings: Optional[Dict[str, Any]] = None,
) -> UploadResult:
    """Wire publisher, collection creator and uploader for one request and run it."""
    settings = settings if settings is not None else load_settings()
    shopify = settings.get("shopify", {})

    publisher = ShopifyProductPublisher(
        client,
        multiplier=multiplier,
        prefix_keyword=prefix_keyword,
        description_prefix=description_prefix,
        page_size=settings.get("scraper", {}).get("page_size", 250),
        check_delay=shopify.get("existence_check_delay", 0.2),
    )
    creator = ShopifyCollectionCreator(client, lookup_limit=shopify.get("collection_lookup_limit", 5000))
    return CatalogUploader(publisher, creator).upload(products, collections)


def upload_catalog(
    store_url: Optional[str],
    admin_token: Optional[str],
    products: Optional[List[Product]] = None,
    collections: Optional[List[Collection]] = None,
    price_multiplier: Any = 1,
    prefix_keyword: Optional[str] = "",
    description_prefix_keyword: Optional[str] = "",
    settings: Optional[Dict[str, Any]] = None,
    client_factory: Callable[..., ShopifyAPIClient] = ShopifyAPIClient.from_settings,
) -> PipelineResponse:
    """
    Publish curated products/collections to the destination store.

    Returns:
        200 {success, uploadedProducts, uploadedCollections, errors?, message}
        400 when storeUrl/adminToken is missing, 500 on unexpected failure
    """
    try:
        validate_upload_target(store_url, admin_token)
    except ValidationError as e:
        return _failure(400, str(e))

    settings = settings if settings is not None else load_settings()

    try:
        with client_factory(store_url, admin_token, settings) as client:
            logger.info("Starting upload to %s...", client.shop)
            result = run_upload(
                client,
                products or [],
                collections or [],
                multiplier=parse_multiplier(price_multiplier),
                prefix_keyword=(prefix_keyword or "").strip(),
                description_prefix=(description_prefix_keyword or "").strip(),
                settings=settings,
            )
    except Exception as e:
        logger.exception("Upload error")
        return _failure(500, str(e) or DEFAULT_UPLOAD_ERROR)

    body: Dict[str, Any] = {
        "success": True,
        "uploadedProducts": result.uploaded_products,
        "uploadedCollections": result.uploaded_collections,
        "message": result.message,
    }
    if result.errors:
        body["errors"] = result.errors
    return PipelineResponse(200, body)
