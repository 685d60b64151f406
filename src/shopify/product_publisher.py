"""
Shopify Product Publisher

Creates copied products on the destination store.

Handles name prefixing, price markup, the existence check used to keep
uploads idempotent, and the post-creation variant image pass.
"""

import logging
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Optional

from ..common.constants import EXISTENCE_CHECK_DELAY_SECONDS, PAGE_SIZE
from ..common.text_utils import derive_product_name
from ..models import Product, ProductVariant
from .api_client import ShopifyAPIClient
from .variant_images import AssociationResult, associate_variant_images

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def apply_multiplier(price: Any, multiplier: float) -> str:
    """
    Multiply a price and round half-up to 2 decimals.

    apply_multiplier("10.00", 2) -> "20.00". Non-numeric prices count as 0.
    """
    try:
        value = Decimal(str(price)) * Decimal(str(multiplier))
    except (InvalidOperation, ValueError):
        value = Decimal(0)
    if not value.is_finite():
        value = Decimal(0)
    return str(value.quantize(CENTS, rounding=ROUND_HALF_UP))


def _variant_payload(variant: ProductVariant, multiplier: float) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "price": apply_multiplier(variant.price, multiplier),
        "inventory_management": None,
        "inventory_policy": "deny",
    }

    for name in ("option1", "option2", "option3", "sku", "barcode", "weight_unit"):
        value = getattr(variant, name)
        if value:
            data[name] = value

    if variant.compare_at_price:
        data["compare_at_price"] = apply_multiplier(variant.compare_at_price, multiplier)

    for name in ("weight", "grams", "inventory_quantity", "taxable", "requires_shipping", "position"):
        value = getattr(variant, name)
        if value is not None:
            data[name] = value

    return data


def build_product_payload(
    product: Product,
    multiplier: float = 1.0,
    prefix_keyword: str = "",
    description_prefix: str = "",
) -> Dict[str, Any]:
    """
    Build the products.json POST body for a copied product.

    Args:
        product: Source product
        multiplier: Price markup applied to price and compare_at_price
        prefix_keyword: Replaces the first word of the title when non-empty
        description_prefix: Prepended to the description, space separated

    Returns:
        {"product": {...}} with options placed before variants
    """
    description_prefix = (description_prefix or "").strip()
    description = f"{description_prefix} {product.description}" if description_prefix else product.description

    if product.variants:
        variants = [_variant_payload(v, multiplier) for v in product.variants]
    else:
        variants = [{
            "price": apply_multiplier(product.price, multiplier),
            "inventory_management": None,
            "inventory_policy": "deny",
        }]

    if product.images:
        images = []
        for img in product.images:
            image_data: Dict[str, Any] = {"src": img.src}
            if img.alt:
                image_data["alt"] = img.alt
            if img.position is not None:
                image_data["position"] = img.position
            images.append(image_data)
    elif product.image:
        images = [{"src": product.image}]
    else:
        images = []

    options = [
        {"name": o.name, "values": list(o.values), "position": o.position or 1}
        for o in product.options or []
    ]

    data: Dict[str, Any] = {
        "title": derive_product_name(product.name, prefix_keyword),
        "body_html": description,
    }

    if product.vendor:
        data["vendor"] = product.vendor
    if product.product_type:
        data["product_type"] = product.product_type
    if product.tags:
        data["tags"] = ", ".join(product.tags) if isinstance(product.tags, list) else product.tags
    if product.handle:
        data["handle"] = product.handle
    if product.published_at:
        data["published_at"] = product.published_at

    if images:
        data["images"] = images
    # Shopify expects options before variants
    if options:
        data["options"] = options
    data["variants"] = variants

    return {"product": data}


class ShopifyProductPublisher:
    """
    Publishes catalog products to the destination store.

    Usage:
        publisher = ShopifyProductPublisher(client, multiplier=2, prefix_keyword="PREMIUM")
        existing_id = publisher.find_existing_product(publisher.product_name(product))
        if existing_id is None:
            created = publisher.create_product(product)
            linked = publisher.link_variant_images(product, created)
    """

    def __init__(
        self,
        client: ShopifyAPIClient,
        multiplier: float = 1.0,
        prefix_keyword: str = "",
        description_prefix: str = "",
        page_size: int = PAGE_SIZE,
        check_delay: float = EXISTENCE_CHECK_DELAY_SECONDS,
    ):
        """
        Initialize the publisher.

        Args:
            client: Admin API client for the destination store
            multiplier: Price markup
            prefix_keyword: Title prefix keyword (replaces the first word)
            description_prefix: Description prefix keyword
            page_size: Page size for the existence check
            check_delay: Pause between existence check pages, in seconds
        """
        self.client = client
        self.multiplier = multiplier
        self.prefix_keyword = (prefix_keyword or "").strip()
        self.description_prefix = (description_prefix or "").strip()
        self.page_size = page_size
        self.check_delay = check_delay

    def product_name(self, product: Product) -> str:
        """Title the product gets on the destination store."""
        return derive_product_name(product.name, self.prefix_keyword)

    def find_existing_product(self, title: str) -> Optional[int]:
        """
        Look for a destination product with exactly this title.

        Pages through products.json until found or exhausted. Any failure
        counts as "not found" so the caller goes on to create it.

        Returns:
            Remote product id, or None
        """
        page = 1
        try:
            while True:
                result = self.client.rest_request(
                    "GET", f"products.json?limit={self.page_size}&page={page}"
                )
                products = result.get("products", [])

                for remote in products:
                    if remote.get("title") == title:
                        return remote.get("id")

                if len(products) < self.page_size:
                    return None

                page += 1
                time.sleep(self.check_delay)
        except Exception as e:
            logger.warning("Error checking if product exists: %s (%s)", title, e)
            return None

    def create_product(self, product: Product) -> Dict[str, Any]:
        """
        Create the product. Variant images are linked separately by link_variant_images.

        Returns:
            Created product object from the Admin API

        Raises:
            HttpError, RateLimitExceeded, requests.exceptions.RequestException
        """
        payload = build_product_payload(
            product,
            multiplier=self.multiplier,
            prefix_keyword=self.prefix_keyword,
            description_prefix=self.description_prefix,
        )
        body = payload["product"]
        logger.info("Uploading product \"%s\" with %d images, %d variants, %d options",
                    body["title"], len(body.get("images", [])), len(body["variants"]),
                    len(body.get("options", [])))

        try:
            result = self.client.rest_request("POST", "products.json", payload)
        except Exception:
            logger.debug("Product data sent: %s", payload)
            raise

        created = result.get("product")
        if not created:
            raise ValueError("Product missing from create response")

        return created

    def link_variant_images(self, product: Product, created: Dict[str, Any]) -> AssociationResult:
        """Post-creation pass binding created variants to created images. Never raises."""
        return associate_variant_images(self.client, product, created)
