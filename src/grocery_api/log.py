"""Logging setup for the grocery_api logger tree."""
import logging

ROOT_LOGGER = "grocery_api"


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        h = logging.StreamHandler()
        fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        h.setFormatter(fmt)
        logger.addHandler(h)
    logger.setLevel(level.upper())
    return logger
