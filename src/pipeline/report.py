"""
Console Report

Plain-text lines for the CLI: the staged catalog before an upload and
the outcome after it.
"""

from typing import List

from ..common.currency import format_price_usd
from ..models import Collection, Product
from ..shopify.catalog_uploader import UploadResult
from .orchestrator import summarize_errors


def staged_lines(products: List[Product], collections: List[Collection]) -> List[str]:
    """One line per staged product (with its price) and per staged collection."""
    lines = [f"{product.name}  {format_price_usd(product.price)}" for product in products]
    for collection in collections:
        lines.append(f"[{collection.name}]  {len(collection.products)} products")
    return lines


def upload_summary_lines(result: UploadResult) -> List[str]:
    """
    Summary of an upload.

    Errors are capped by summarize_errors; a run with any item error is
    reported as a partial failure.
    """
    lines = [
        result.message,
        f"Variant images linked: {result.images_linked} ({result.images_failed} failed)",
        f"Status: {'PARTIAL FAILURE' if result.partial_failure else 'OK'}",
    ]
    if result.partial_failure:
        lines.append(f"{len(result.errors)} error(s) occurred:")
        lines.extend(f"  - {line}" for line in summarize_errors(result.errors))
    return lines
