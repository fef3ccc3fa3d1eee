"""
Environment configuration.

All settings are read once at import time:
    OCHE_ENV            deployment environment name (default: development)
    OCHE_LOG_LEVEL      root log level (default: INFO)
    OCHE_HISTORY_DIR    directory for completed match JSON files (unset: in-memory)
    OCHE_ROSTER_FILE    JSON file backing the player roster (unset: in-memory)
    ALLOWED_ORIGINS     comma-separated CORS origins (default: *)
"""

import logging
import os

OCHE_ENV = os.getenv("OCHE_ENV", "development")
OCHE_LOG_LEVEL = os.getenv("OCHE_LOG_LEVEL", "INFO").upper()
OCHE_HISTORY_DIR = os.getenv("OCHE_HISTORY_DIR") or None
OCHE_ROSTER_FILE = os.getenv("OCHE_ROSTER_FILE") or None
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from OCHE_LOG_LEVEL (or an explicit level)."""
    requested = (level or OCHE_LOG_LEVEL).upper()
    numeric = logging.getLevelName(requested)
    if not isinstance(numeric, int):
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.warning(
            "OCHE_LOG_LEVEL is not a valid level (got %r); defaulting to INFO",
            requested,
        )
        return

    logging.basicConfig(level=numeric, format=LOG_FORMAT)
