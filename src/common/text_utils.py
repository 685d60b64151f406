"""
Text Utilities

Helper functions for text processing and cleanup.
"""

from bs4 import BeautifulSoup

from .constants import DESCRIPTION_LIMIT, NO_DESCRIPTION


def strip_html(html: str) -> str:
    """
    Remove HTML tags, keeping the text content.

    Args:
        html: HTML fragment (e.g. Shopify body_html)

    Returns:
        Plain text, or "" for empty input
    """
    if not html:
        return ""
    return BeautifulSoup(html, "lxml").get_text()


def plain_description(
    html: str,
    limit: int = DESCRIPTION_LIMIT,
    fallback: str = NO_DESCRIPTION,
) -> str:
    """
    Build a plain-text description from body HTML.

    Args:
        html: Source body HTML
        limit: Maximum length of the result
        fallback: Returned when the body is empty

    Returns:
        Tag-stripped text truncated to `limit` characters
    """
    if not html:
        return fallback
    return strip_html(html)[:limit]


def derive_product_name(name: str, prefix_keyword: str) -> str:
    """
    Replace the first space-delimited word of a product name with a keyword.

    "Red Shirt" + "PREMIUM" -> "PREMIUM Shirt". Empty keyword leaves the name as is.
    """
    keyword = (prefix_keyword or "").strip()
    if not keyword:
        return name
    words = (name or "").split(" ")
    words[0] = keyword
    return " ".join(words)
