"""Process-wide logging setup."""

import logging

from catalogo.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Set the root level and attach a stream handler if none is installed."""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    # SQL echo is noisy; only surface warnings from the engine
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
