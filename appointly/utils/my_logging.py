# appointly/utils/my_logging.py
"""Logging configuration"""
import logging
import sys
from appointly.config.settings import get_settings
from appointly.core.middleware import correlation_id_var

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

NOISY_LOGGERS = [
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic",
    "httpx",
    "uvicorn.access",
]


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the id of the request that produced it"""

    def filter(self, record):
        if not hasattr(record, "correlation_id"):
            record.correlation_id = correlation_id_var.get()
        return True


def setup_logging(verbose=True):
    """Configure application logging from LOG_LEVEL"""
    settings = get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[handler]
    )

    # SQL echo and access logs drown out booking decisions
    quiet_level = logging.WARNING if verbose else logging.ERROR
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
