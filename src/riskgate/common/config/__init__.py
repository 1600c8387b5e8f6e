"""Configuration module - environment settings and risk policy."""

from riskgate.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    StoreBackend,
    TURNSTILE_VERIFY_URL,
    get_config,
    reset_config,
)
from riskgate.common.config.policy import (
    RiskPolicy,
    RiskWeights,
    LevelThresholds,
    load_policy,
)

__all__ = [
    "Config",
    "Environment",
    "LogLevel",
    "StoreBackend",
    "TURNSTILE_VERIFY_URL",
    "get_config",
    "reset_config",
    "RiskPolicy",
    "RiskWeights",
    "LevelThresholds",
    "load_policy",
]
