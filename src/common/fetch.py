"""
Fetch with Backoff

Retrying wrapper around requests used by every remote call.
Retries only on HTTP 429; every other failure surfaces immediately.
"""

import logging
import time
from typing import Optional

import requests

from .constants import BASE_DELAY_SECONDS, MAX_RETRIES
from .errors import HttpError, RateLimitExceeded

logger = logging.getLogger(__name__)


def _retry_after_seconds(response: requests.Response) -> Optional[float]:
    """Parse the Retry-After header (seconds form). Returns None if absent or unusable."""
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        return None


def fetch_with_retry(
    session: requests.Session,
    url: str,
    method: str = "GET",
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY_SECONDS,
    **kwargs,
) -> requests.Response:
    """
    Issue an HTTP request, backing off on rate limiting.

    Args:
        session: Session used for the request
        url: Absolute URL
        method: HTTP method
        max_retries: Retries allowed after the first 429
        base_delay: Backoff base in seconds (doubled per attempt)
        **kwargs: Passed through to session.request (json, timeout, headers...)

    Returns:
        The 2xx response

    Raises:
        RateLimitExceeded: 429 on every attempt
        HttpError: Any other non-2xx status
        requests.exceptions.RequestException: Transport failures, unchanged
    """
    for attempt in range(max_retries + 1):
        response = session.request(method, url, **kwargs)

        if response.status_code == 429:
            if attempt >= max_retries:
                logger.error("Rate limited after %d retries: %s", max_retries, url)
                raise RateLimitExceeded(url, max_retries)

            wait = _retry_after_seconds(response)
            if wait is None:
                wait = base_delay * (2 ** attempt)
            logger.warning("Rate limited (429). Waiting %.1fs before retry %d/%d...",
                           wait, attempt + 1, max_retries)
            time.sleep(wait)
            continue

        if not 200 <= response.status_code < 300:
            raise HttpError(response.status_code, response.reason or "", response.text or "")

        return response

    # max_retries < 0
    raise RateLimitExceeded(url, max_retries)
