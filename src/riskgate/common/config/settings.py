"""Configuration management - Centralized configuration for RiskGate.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from riskgate.common.exceptions import ConfigurationError


TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreBackend(str, Enum):
    """Keyed store backend types."""
    MEMORY = "memory"
    DYNAMODB = "dynamodb"


def _get_project_root() -> Path:
    """Get the project root directory."""
    # settings.py -> config -> common -> riskgate -> src -> project_root
    current = Path(__file__).resolve()
    return current.parent.parent.parent.parent.parent


def _default_policy_file() -> Path:
    env_value = os.getenv("RISKGATE_POLICY_FILE")
    if env_value:
        return Path(env_value)
    return _get_project_root() / "config" / "risk_policy.yaml"


@dataclass
class Config:
    """Central configuration object for RiskGate.

    All settings can be overridden via environment variables prefixed with RISKGATE_.

    Example:
        RISKGATE_ENVIRONMENT=production
        RISKGATE_STORE_BACKEND=dynamodb
        RISKGATE_DYNAMODB_TABLE=riskgate-state
    """

    # Core settings
    environment: Environment = field(
        default_factory=lambda: Environment(
            os.getenv("RISKGATE_ENVIRONMENT", "development")
        )
    )
    debug: bool = field(
        default_factory=lambda: os.getenv("RISKGATE_DEBUG", "false").lower() == "true"
    )
    log_level: LogLevel = field(
        default_factory=lambda: LogLevel(os.getenv("RISKGATE_LOG_LEVEL", "INFO"))
    )

    # Paths
    project_root: Path = field(default_factory=_get_project_root)
    policy_file: Path = field(default_factory=_default_policy_file)

    # API settings
    api_host: str = field(
        default_factory=lambda: os.getenv("RISKGATE_API_HOST", "0.0.0.0")
    )
    api_port: int = field(
        default_factory=lambda: int(os.getenv("RISKGATE_API_PORT", "8000"))
    )

    # Keyed store settings
    store_backend: StoreBackend = field(
        default_factory=lambda: StoreBackend(
            os.getenv("RISKGATE_STORE_BACKEND", "memory")
        )
    )
    dynamodb_table: Optional[str] = field(
        default_factory=lambda: os.getenv("RISKGATE_DYNAMODB_TABLE")
    )
    aws_region: str = field(
        default_factory=lambda: os.getenv("AWS_DEFAULT_REGION", "us-east-1")
    )

    # Challenge verification
    turnstile_secret: Optional[str] = field(
        default_factory=lambda: os.getenv("RISKGATE_TURNSTILE_SECRET")
    )
    turnstile_verify_url: str = field(
        default_factory=lambda: os.getenv(
            "RISKGATE_TURNSTILE_VERIFY_URL", TURNSTILE_VERIFY_URL
        )
    )
    challenge_verify_timeout_seconds: float = field(
        default_factory=lambda: float(
            os.getenv("RISKGATE_CHALLENGE_VERIFY_TIMEOUT", "5.0")
        )
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.store_backend == StoreBackend.DYNAMODB and not self.dynamodb_table:
            raise ConfigurationError(
                "RISKGATE_DYNAMODB_TABLE must be set when using the DynamoDB store",
                details={"store_backend": self.store_backend.value},
            )

        if self.challenge_verify_timeout_seconds <= 0:
            raise ConfigurationError(
                "RISKGATE_CHALLENGE_VERIFY_TIMEOUT must be positive",
                details={"value": self.challenge_verify_timeout_seconds},
            )

        # Challenges always fail closed without a secret
        if self.environment == Environment.PRODUCTION and not self.turnstile_secret:
            import warnings
            warnings.warn(
                "RISKGATE_TURNSTILE_SECRET is not set; every challenge will fail",
                RuntimeWarning,
                stacklevel=2
            )

        if self.environment == Environment.PRODUCTION and self.debug:
            import warnings
            warnings.warn(
                "Debug mode is enabled in production environment",
                RuntimeWarning,
                stacklevel=2
            )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
