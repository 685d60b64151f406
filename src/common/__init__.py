# Common utilities
from .config_loader import load_config, load_settings, merge_settings
from .currency import convert_jpy_to_usd, format_price_usd
from .errors import (
    CertificateError,
    FetchError,
    HttpError,
    NetworkError,
    RateLimitExceeded,
    ScrapeError,
    StoreCopyError,
    ValidationError,
    classify_transport_error,
)
from .fetch import fetch_with_retry
from .log_config import setup_logging
from .text_utils import derive_product_name, plain_description, strip_html
