"""
Currency Normalizer

Converts source-store prices (JPY) to the display currency (USD).
"""

import math
from typing import Union

from .constants import JPY_TO_USD_RATE

Number = Union[int, float, str]


def _to_float(amount) -> float:
    if isinstance(amount, bool):
        return math.nan
    try:
        return float(amount)
    except (TypeError, ValueError):
        return math.nan


def round_half_up(value: float, places: int = 2) -> float:
    """Round like Math.round(value * 100) / 100."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def convert_jpy_to_usd(amount: Number, rate: float = JPY_TO_USD_RATE) -> float:
    """
    Convert a JPY price to USD.

    Args:
        amount: Price as a number or numeric string
        rate: USD per JPY

    Returns:
        USD amount rounded to 2 decimals, or 0 for non-numeric/non-positive input
    """
    value = _to_float(amount)
    if not math.isfinite(value) or value <= 0:
        return 0
    return round_half_up(value * rate)


def format_price_usd(price: Number) -> str:
    """Format a price as USD currency, e.g. "$1,234.56"."""
    value = _to_float(price)
    if not math.isfinite(value):
        return "$0.00"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
