#!/usr/bin/env python3
"""
Quote Proxy - Main Entry Point

Serves customer quotes (Shopify draft orders) behind a Shopify App Proxy.
Every proxied request is signature-checked before the Admin API is queried.
"""

import sys

import uvicorn

from quote_proxy.config.settings import settings
from quote_proxy.proxy.app import create_app
from quote_proxy.utils.logger import setup_logging, get_logger

logger = get_logger(__name__)


def main():
    """Entry point."""
    setup_logging(
        level=settings.logging.level,
        log_file=settings.logging.log_file or None,
    )
    logger.info("Logging configured", level=settings.logging.level)

    # Missing values are reported but not fatal: requests fail individually
    missing = settings.validate()
    if missing:
        logger.warning("Missing configuration", missing=missing)

    app = create_app(settings)

    logger.info(
        "Starting quote proxy",
        host=settings.server.host,
        port=settings.server.port,
    )
    try:
        uvicorn.run(app, host=settings.server.host, port=settings.server.port, log_config=None)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error("Fatal error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
