import sys
from loguru import logger
from app.core.config import settings


def configure_logging(level: str = None):
    """Replace loguru's default sink with one honouring LOG_LEVEL."""
    logger.remove()
    logger.add(sys.stderr, level=(level or settings.LOG_LEVEL).upper())
    logger.debug(f"Logging configured at level {(level or settings.LOG_LEVEL).upper()}")
