"""
Catalog Transformer

Maps raw storefront JSON (products.json / collections.json records) into
the normalized Product and Collection models.

Prices are converted from the source currency on every variant, not just
the first. Variant, option and image lists are kept whole or dropped whole.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..common.constants import (
    DESCRIPTION_LIMIT,
    JPY_TO_USD_RATE,
    NO_DESCRIPTION,
    PLACEHOLDER_IMAGE,
)
from ..common.currency import convert_jpy_to_usd
from ..common.text_utils import plain_description
from ..models import Collection, Product, ProductImage, ProductOption, ProductVariant

logger = logging.getLogger(__name__)


def _text_or_none(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _tags(value: Any):
    if isinstance(value, list):
        return [str(t) for t in value if str(t).strip()] or None
    return _text_or_none(value)


class CatalogTransformer:
    """
    Stateless mapper from storefront records to catalog models.

    Usage:
        transformer = CatalogTransformer(rate=0.0067)
        product = transformer.transform_product(raw_product)
        collection = transformer.transform_collection(raw_collection, raw_products)
    """

    def __init__(
        self,
        rate: float = JPY_TO_USD_RATE,
        placeholder_image: str = PLACEHOLDER_IMAGE,
        description_limit: int = DESCRIPTION_LIMIT,
        no_description: str = NO_DESCRIPTION,
    ):
        self.rate = rate
        self.placeholder_image = placeholder_image
        self.description_limit = description_limit
        self.no_description = no_description

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "CatalogTransformer":
        scraper = settings.get("scraper", {})
        return cls(
            rate=settings.get("currency", {}).get("rate", JPY_TO_USD_RATE),
            placeholder_image=scraper.get("placeholder_image", PLACEHOLDER_IMAGE),
            description_limit=scraper.get("description_limit", DESCRIPTION_LIMIT),
            no_description=scraper.get("no_description", NO_DESCRIPTION),
        )

    def _price(self, value: Any) -> float:
        return convert_jpy_to_usd(value if value is not None else 0, rate=self.rate)

    def _description(self, body_html: Optional[str]) -> str:
        return plain_description(
            body_html or "",
            limit=self.description_limit,
            fallback=self.no_description,
        )

    def transform_variant(self, raw: Dict[str, Any]) -> ProductVariant:
        """Map one source variant; price and compare_at_price converted independently."""
        compare_at = None
        if raw.get("compare_at_price"):
            converted = self._price(raw["compare_at_price"])
            compare_at = f"{converted:.2f}" if converted else None

        return ProductVariant(
            price=f"{self._price(raw.get('price')):.2f}",
            sku=_text_or_none(raw.get("sku")),
            compare_at_price=compare_at,
            option1=_text_or_none(raw.get("option1")),
            option2=_text_or_none(raw.get("option2")),
            option3=_text_or_none(raw.get("option3")),
            barcode=_text_or_none(raw.get("barcode")),
            weight=raw.get("weight"),
            weight_unit=_text_or_none(raw.get("weight_unit")),
            grams=raw.get("grams"),
            inventory_quantity=raw.get("inventory_quantity"),
            taxable=raw.get("taxable"),
            requires_shipping=raw.get("requires_shipping"),
            image_id=raw.get("image_id"),
            position=raw.get("position"),
        )

    @staticmethod
    def transform_option(raw: Dict[str, Any]) -> ProductOption:
        return ProductOption(
            name=raw.get("name") or "",
            values=[str(v) for v in raw.get("values") or []],
            position=raw.get("position") or None,
        )

    @staticmethod
    def transform_image(raw: Dict[str, Any]) -> ProductImage:
        return ProductImage(
            src=raw.get("src") or "",
            id=raw.get("id"),
            alt=raw.get("alt") or None,
            position=raw.get("position") or None,
            variant_ids=list(raw.get("variant_ids") or []) or None,
        )

    def transform_product(self, raw: Dict[str, Any]) -> Product:
        """
        Map a storefront product record.

        Args:
            raw: One item of products.json["products"]

        Returns:
            Product with id "product-<source id>"
        """
        raw_variants = raw.get("variants") or []
        raw_options = raw.get("options") or []
        raw_images = raw.get("images") or []

        image = raw_images[0].get("src") if raw_images else None
        price = self._price(raw_variants[0].get("price")) if raw_variants else 0

        variants = [self.transform_variant(v) for v in raw_variants]
        options = [self.transform_option(o) for o in raw_options]
        images = [self.transform_image(i) for i in raw_images]

        return Product(
            id=f"product-{raw.get('id')}",
            name=raw.get("title") or "",
            description=self._description(raw.get("body_html")),
            image=image or self.placeholder_image,
            price=price,
            variants=variants or None,
            options=options or None,
            images=images or None,
            vendor=_text_or_none(raw.get("vendor")),
            product_type=_text_or_none(raw.get("product_type")),
            tags=_tags(raw.get("tags")),
            handle=_text_or_none(raw.get("handle")),
            published_at=_text_or_none(raw.get("published_at")),
        )

    def transform_products(self, raws: Iterable[Dict[str, Any]]) -> List[Product]:
        return [self.transform_product(raw) for raw in raws]

    def transform_collection(
        self,
        raw: Dict[str, Any],
        raw_products: Iterable[Dict[str, Any]],
    ) -> Collection:
        """
        Map a storefront collection record together with its product list.

        Args:
            raw: One item of collections.json["collections"]
            raw_products: Records from collections/<handle>/products.json

        Returns:
            Collection with id "collection-<source id>" owning its product snapshot
        """
        image = (raw.get("image") or {}).get("src")
        products = self.transform_products(raw_products)
        logger.debug("Collection %s: %d products", raw.get("handle"), len(products))

        return Collection(
            id=f"collection-{raw.get('id')}",
            name=raw.get("title") or "",
            description=self._description(raw.get("body_html")),
            image=image or self.placeholder_image,
            products=products,
        )
