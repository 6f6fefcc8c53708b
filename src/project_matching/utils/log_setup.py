"""Logging configuration for processes embedding the matching library."""

import logging
from typing import Optional

from ..config import settings


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name (uses settings if not provided)
    """
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=settings.log_format
    )

    # Provider SDKs are chatty at INFO
    for noisy in ("httpx", "openai", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
