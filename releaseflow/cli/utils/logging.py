import logging
import sys


logger = logging.getLogger("releaseflow")


def configure_logging(level: int = logging.WARNING):
    """
    Configures the package logger to write plain messages to stderr.

    stdout carries the computed version, so log output never goes there.
    """
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
