"""
Error Types

Exception hierarchy shared by the crawler, the Admin API client and the
pipeline entry points.
"""

import ssl
from typing import Optional

import requests

CERTIFICATE_MARKERS = ("certificate", "CERT_", "SSL")


class StoreCopyError(Exception):
    """Base class for all store copy errors."""


class FetchError(StoreCopyError):
    """A remote call finished without a usable response."""


class HttpError(FetchError):
    """Non-2xx response (other than an exhausted 429)."""

    def __init__(self, status_code: int, reason: str = "", body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"HTTP {status_code}: {reason}")


class RateLimitExceeded(FetchError):
    """HTTP 429 persisted after every retry was used."""

    def __init__(self, url: str, retries: int):
        self.url = url
        self.retries = retries
        super().__init__(f"Rate limited after {retries} retries")


class ValidationError(StoreCopyError):
    """Required request input is missing or malformed."""


class ScrapeError(StoreCopyError):
    """Fatal failure while crawling a source store."""


class NetworkError(StoreCopyError):
    """Transport-level failure (connection refused, DNS, timeout)."""


class CertificateError(NetworkError):
    """TLS certificate validation failed."""


def _looks_like_certificate_error(exc: BaseException) -> bool:
    if isinstance(exc, (requests.exceptions.SSLError, ssl.SSLError)):
        return True
    message = str(exc)
    return any(marker in message for marker in CERTIFICATE_MARKERS)


def classify_transport_error(exc: BaseException) -> Optional[NetworkError]:
    """
    Classify a transport failure by walking the exception chain.

    Args:
        exc: Exception raised somewhere below the pipeline

    Returns:
        CertificateError or NetworkError wrapping the cause, or None when
        the chain holds no transport failure
    """
    seen = set()
    current: Optional[BaseException] = exc
    network_cause = None

    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if _looks_like_certificate_error(current):
            error = CertificateError(str(current))
            error.__cause__ = current
            return error
        if network_cause is None and isinstance(current, requests.exceptions.RequestException):
            network_cause = current
        current = current.__cause__ or current.__context__

    if network_cause is not None:
        error = NetworkError(str(network_cause))
        error.__cause__ = network_cause
        return error
    return None
