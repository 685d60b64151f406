"""
Logging Configuration

One handler on the package logger, shared by the CLI scripts and the
web server. Reports go to stdout, log lines to stderr.
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Chatty at INFO; only surfaced with --verbose
NOISY_LOGGERS = ("urllib3", "httpx", "uvicorn.access")


def setup_logging(verbose: bool = False, quiet: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the "src" logger.

    Args:
        verbose: DEBUG level, third-party request logs included
        quiet: WARNING level
        stream: Handler stream (default: sys.stderr)

    Returns:
        The configured package logger
    """
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    package_logger = logging.getLogger("src")
    package_logger.setLevel(level)
    # Calling twice must not duplicate output
    package_logger.handlers.clear()
    package_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return package_logger
