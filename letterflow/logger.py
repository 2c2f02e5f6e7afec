"""Central logging configuration for the library."""
import logging
from typing import Optional

from .config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(name: Optional[str]) -> int:
    """Numeric level for a level name; unknown names fall back to INFO."""
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger with default configuration applied."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=resolve_level(LOG_LEVEL), format=_LOG_FORMAT)
    return logger
