"""Package logger configuration for the command line tool."""

import logging
import sys

LOGGER_NAME = "keyfmt"


def get_logger(level: str | None = None) -> logging.Logger:
    """Return the ``keyfmt`` logger, adding one stderr handler on first use.

    Library modules log through ``logging.getLogger(__name__)`` and stay
    silent until a caller configures this logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)
        fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s %(message)s")
        h.setFormatter(fmt)
        logger.addHandler(h)
        logger.setLevel(logging.WARNING)
    if level:
        logger.setLevel(level.upper())
    return logger
