"""
Logging utilities for the read APIs and background workers.

Provides a consistent logging format and configuration.
"""

import logging
import sys

_NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # Client libraries log every request at INFO/DEBUG; keep them quieter.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLogger().level))


__all__ = ["configure_logging"]
