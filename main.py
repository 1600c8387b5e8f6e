#!/usr/bin/env python3
"""Main entry point for RiskGate."""

import uvicorn

from riskgate.common.logging import get_logger
from riskgate.common.config import get_config

logger = get_logger(__name__)


def main():
    """Run the API gateway with the configured host and port."""
    config = get_config()
    logger.info(f"RiskGate starting in {config.environment.value} mode")
    logger.info(f"Store backend: {config.store_backend.value}")

    uvicorn.run(
        "riskgate.api.gateway:app",
        host=config.api_host,
        port=config.api_port,
        reload=config.is_development and config.debug,
        log_level=config.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
