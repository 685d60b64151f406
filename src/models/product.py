"""
Catalog data models.

Pure data classes for scraped products and collections.
No business logic beyond dict conversion for the JSON endpoints.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class ProductImage:
    """Product image as scraped from the source store."""
    src: str
    id: Optional[int] = None            # Source-side id, same-request matching only
    alt: Optional[str] = None
    position: Optional[int] = None
    variant_ids: Optional[List[int]] = None  # Source variant ids using this image

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "id": self.id,
            "src": self.src,
            "alt": self.alt,
            "position": self.position,
            "variant_ids": list(self.variant_ids) if self.variant_ids else None,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductImage":
        return cls(
            src=data.get("src") or "",
            id=data.get("id"),
            alt=data.get("alt"),
            position=data.get("position"),
            variant_ids=data.get("variant_ids") or None,
        )


@dataclass
class ProductOption:
    """Product option (e.g. Size with values S/M/L)."""
    name: str
    values: List[str] = field(default_factory=list)
    position: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "name": self.name,
            "values": list(self.values),
            "position": self.position,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductOption":
        return cls(
            name=data.get("name") or "",
            values=list(data.get("values") or []),
            position=data.get("position"),
        )


@dataclass
class ProductVariant:
    """Product variant. Prices are 2-decimal strings in the display currency."""
    price: str
    sku: Optional[str] = None
    compare_at_price: Optional[str] = None
    option1: Optional[str] = None
    option2: Optional[str] = None
    option3: Optional[str] = None
    barcode: Optional[str] = None
    weight: Optional[float] = None
    weight_unit: Optional[str] = None
    grams: Optional[int] = None
    inventory_quantity: Optional[int] = None
    taxable: Optional[bool] = None
    requires_shipping: Optional[bool] = None
    image_id: Optional[int] = None      # Hint into the product's image list, not a stable id
    position: Optional[int] = None

    FIELDS = (
        "price", "sku", "compare_at_price", "option1", "option2", "option3",
        "barcode", "weight", "weight_unit", "grams", "inventory_quantity",
        "taxable", "requires_shipping", "image_id", "position",
    )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({name: getattr(self, name) for name in self.FIELDS})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductVariant":
        values = {name: data.get(name) for name in cls.FIELDS}
        values["price"] = str(values["price"]) if values["price"] is not None else "0.00"
        return cls(**values)

    @property
    def display_name(self) -> Optional[str]:
        return self.option1 or self.option2 or self.option3


@dataclass
class Product:
    """
    Normalized product.

    `id` is scrape-session local ("product-<source id>") and never sent to the
    destination store. variants/options/images are either whole lists or None.
    """
    id: str
    name: str
    description: str
    image: str
    price: float
    variants: Optional[List[ProductVariant]] = None
    options: Optional[List[ProductOption]] = None
    images: Optional[List[ProductImage]] = None

    # Pass-through Shopify fields
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    tags: Optional[Union[str, List[str]]] = None
    handle: Optional[str] = None
    published_at: Optional[str] = None

    def __post_init__(self):
        if self.price is None or not self.price >= 0:
            self.price = 0

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "price": self.price,
            "vendor": self.vendor,
            "product_type": self.product_type,
            "tags": self.tags,
            "handle": self.handle,
            "published_at": self.published_at,
            "variants": [v.to_dict() for v in self.variants] if self.variants else None,
            "options": [o.to_dict() for o in self.options] if self.options else None,
            "images": [i.to_dict() for i in self.images] if self.images else None,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        try:
            price = float(data.get("price") or 0)
        except (TypeError, ValueError):
            price = 0.0

        variants = [ProductVariant.from_dict(v) for v in data.get("variants") or []]
        options = [ProductOption.from_dict(o) for o in data.get("options") or []]
        images = [ProductImage.from_dict(i) for i in data.get("images") or []]

        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            description=data.get("description") or "",
            image=data.get("image") or "",
            price=price,
            variants=variants or None,
            options=options or None,
            images=images or None,
            vendor=data.get("vendor"),
            product_type=data.get("product_type"),
            tags=data.get("tags"),
            handle=data.get("handle"),
            published_at=data.get("published_at"),
        )


@dataclass
class Collection:
    """Collection with its own snapshot of fully transformed products."""
    id: str
    name: str
    description: str
    image: str
    products: List[Product] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "products": [p.to_dict() for p in self.products],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Collection":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            description=data.get("description") or "",
            image=data.get("image") or "",
            products=[Product.from_dict(p) for p in data.get("products") or []],
        )


@dataclass
class UploadHistory:
    """One publish operation. Lives only for the session."""
    id: str
    scrape_store_url: str
    my_store_url: str
    product_names: List[str] = field(default_factory=list)
    collection_names: List[str] = field(default_factory=list)
    date_time: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "scrapeStoreUrl": self.scrape_store_url,
            "myStoreUrl": self.my_store_url,
            "productNames": list(self.product_names),
            "collectionNames": list(self.collection_names),
            "dateTime": self.date_time,
        }
