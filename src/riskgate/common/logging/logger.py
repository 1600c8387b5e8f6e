"""Centralized logging configuration."""

import logging


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level))

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the API process."""
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)
