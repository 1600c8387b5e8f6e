"""Common utilities - logging, config, exceptions."""

from riskgate.common.logging.logger import get_logger
from riskgate.common.config import Config, get_config, reset_config
from riskgate.common.exceptions import (
    RiskGateException,
    ConfigurationError,
    ValidationError,
    StoreError,
)

__all__ = [
    # Logging
    "get_logger",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Exceptions
    "RiskGateException",
    "ConfigurationError",
    "ValidationError",
    "StoreError",
]
