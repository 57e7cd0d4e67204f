#!/usr/bin/env python3
"""
Stock Insights - Main Application Entry Point.

============================================================
USAGE
============================================================
Serve the HTTP API:
    python app.py
    python app.py --host 127.0.0.1 --port 8080 --log-level DEBUG

One-shot insights for a symbol (prints JSON and exits):
    python app.py --insights AAPL

Configuration comes from the environment / .env file
(see core/config.py); CLI flags override host, port and log level.

============================================================
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

import uvicorn

from core.config import AppConfig
from core.constants import SYSTEM_NAME, SYSTEM_VERSION
from core.container import build_container
from core.exceptions import ConfigurationError, InsightsError


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog=SYSTEM_NAME,
        description="Stock watchlist insights over the Alpha Vantage API",
    )
    parser.add_argument("--host", type=str, default=None, help="Bind address (default: API_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT or 8000)")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--insights",
        type=str,
        metavar="SYMBOL",
        default=None,
        help="Print insights for SYMBOL as JSON and exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {SYSTEM_VERSION}")
    return parser


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


# ============================================================
# COMMANDS
# ============================================================

async def print_insights(config: AppConfig, symbol: str) -> int:
    container = build_container(config)
    await container.startup()
    try:
        report = await container.insights.get_insights(symbol)
    except InsightsError as e:
        logger.error(e.to_log_format())
        print(json.dumps({"error": type(e).__name__, "message": e.message}), file=sys.stderr)
        return 1
    finally:
        await container.aclose()

    print(json.dumps(report.to_dict(), indent=2))
    return 0


def serve(config: AppConfig) -> int:
    from dashboard.api import create_app

    logger.info(f"Starting {SYSTEM_NAME} {SYSTEM_VERSION} on {config.api.host}:{config.api.port}")
    container = build_container(config)
    uvicorn.run(
        create_app(container, close_container=True),
        host=config.api.host,
        port=config.api.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = create_parser().parse_args(argv)

    try:
        config = AppConfig.from_env()
    except ConfigurationError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(e.message)
        return 1

    if args.host:
        config.api.host = args.host
    if args.port:
        config.api.port = args.port
    if args.log_level:
        config.log_level = args.log_level

    setup_logging(config.log_level)

    if args.insights:
        return asyncio.run(print_insights(config, args.insights))
    return serve(config)


# ============================================================
# ENTRY POINT
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
