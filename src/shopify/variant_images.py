"""
Variant Image Linker

Re-binds variant images after a product is created on the destination store.

Source ids do not survive the copy: the destination assigns new variant and
image ids. Each source variant's image is resolved heuristically, then matched
to a created image by src URL, and the created variant is updated to point at it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models import Product, ProductImage

logger = logging.getLogger(__name__)


@dataclass
class AssociationResult:
    """Tally of variant-image updates for one product."""
    succeeded: int = 0
    failed: int = 0
    messages: List[str] = field(default_factory=list)

    def fail(self, message: str) -> None:
        self.failed += 1
        self.messages.append(message)
        logger.warning("  %s", message)


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def resolve_variant_image(product: Product, index: int) -> Optional[ProductImage]:
    """
    Pick the source image for the variant at `index`.

    Resolution order:
        1. image_id used as an index into the image list, or equal to a source image id
        2. images carrying variant_ids, taken in order by variant position
        3. the image at the same position as the variant

    Returns:
        Source image, or None when nothing fits
    """
    images = product.images or []
    variants = product.variants or []
    if not images or index >= len(variants):
        return None

    image_id = _as_int(variants[index].image_id)
    if image_id is not None:
        if 0 <= image_id < len(images):
            return images[image_id]
        for image in images:
            if image.id is not None and image.id == image_id:
                return image

    variant_specific = [img for img in images if img.variant_ids]
    if index < len(variant_specific):
        return variant_specific[index]

    if index < len(images):
        return images[index]
    return None


def associate_variant_images(client, product: Product, created: Dict[str, Any]) -> AssociationResult:
    """
    Bind created variants to created images.

    Never raises: every attempt is independent and failures are only counted.

    Args:
        client: ShopifyAPIClient for the destination store
        product: Source product as submitted
        created: The "product" object returned by the create call

    Returns:
        AssociationResult with success/failure counts
    """
    result = AssociationResult()

    created_variants = created.get("variants") or []
    created_images = created.get("images") or []
    if not (created_variants and created_images and product.variants and product.images):
        return result

    logger.info("Associating variant images: %d source variants, %d source images",
                len(product.variants), len(product.images))

    for i in range(min(len(created_variants), len(product.variants))):
        created_variant = created_variants[i]
        source_variant = product.variants[i]
        label = source_variant.display_name or f"variant-{i + 1}"

        source_image = resolve_variant_image(product, i)
        if source_image is None:
            result.fail(f"No matching image found for variant {i} ({label})")
            continue

        target = next((img for img in created_images if img.get("src") == source_image.src), None)
        if not target or not target.get("id"):
            result.fail(f"Could not find created image matching {source_image.src[:50]} for variant {i}")
            continue

        try:
            client.rest_request(
                "PUT",
                f"variants/{created_variant.get('id')}.json",
                {"variant": {"id": created_variant.get("id"), "image_id": target["id"]}},
            )
        except Exception as e:
            result.fail(f"Failed to associate image with variant {created_variant.get('id')}: {e}")
            continue

        result.succeeded += 1
        logger.debug("  Associated image %s with variant %s (%s)", target["id"], created_variant.get("id"), label)

    logger.info("Completed variant image associations: %d successful, %d failed",
                result.succeeded, result.failed)
    return result
