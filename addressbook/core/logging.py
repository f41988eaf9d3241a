import logging
import os
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structured logging defaults for the application."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # Client libraries are chatty at DEBUG.
    for name in ("httpx", "redis"):
        logging.getLogger(name).setLevel(max(logging.getLevelName(level), logging.INFO))
