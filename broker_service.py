#!/usr/bin/env python3
"""
Broker Service

Runs the session broker HTTP API with uvicorn.

The Vimeo access token is read from VIMEO_ACCESS_TOKEN (environment or .env)
on every request. Starting without it is allowed: requests then fail with
HTTP 500 until the token is configured.

Usage:
    python broker_service.py
    python broker_service.py --host 0.0.0.0 --port 8080
"""

import argparse
import logging
import sys

import uvicorn

from broker.api import create_app
from broker.models import BrokerConfig
from config.settings import BROKER_HOST, BROKER_PORT, VIMEO_ACCESS_TOKEN_ENV
from core.logging_config import setup_logging


def main():
    """
    Main entry point for the broker.

    Sets up logging and serves the API until interrupted.
    """
    parser = argparse.ArgumentParser(description="Vimeo upload session broker")
    parser.add_argument("--host", default=BROKER_HOST, help=f"Bind address (default: {BROKER_HOST})")
    parser.add_argument("--port", type=int, default=BROKER_PORT, help=f"Port (default: {BROKER_PORT})")
    args = parser.parse_args()

    setup_logging(log_file="broker.log")

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Vimeo Upload Session Broker Starting")
    logger.info("=" * 60)

    if not BrokerConfig.from_env().has_token:
        logger.warning(
            f"{VIMEO_ACCESS_TOKEN_ENV} is not set; create-upload requests will fail "
            f"until it is added to the environment or .env",
        )

    try:
        uvicorn.run(create_app(), host=args.host, port=args.port, log_config=None)
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
