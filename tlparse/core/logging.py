import logging
import os
import sys

PACKAGE_LOGGER = "tlparse"
LOG_LEVEL_ENV = "TLPARSE_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _level_from_env() -> int:
    name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    return getattr(logging, name, logging.INFO)


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Logger writing to stderr at the level named by TLPARSE_LOG_LEVEL.
    Repeated calls reuse the single handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level_from_env())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%SZ"))
        logger.addHandler(handler)

    # tlparse.* records stop here instead of reaching the root logger
    logger.propagate = False
    return logger


def set_verbose(verbose: bool) -> None:
    """-v: package logger drops to DEBUG."""
    if verbose:
        get_logger(PACKAGE_LOGGER).setLevel(logging.DEBUG)


logger = get_logger(PACKAGE_LOGGER)
