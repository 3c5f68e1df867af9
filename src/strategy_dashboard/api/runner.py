#!/usr/bin/env python3
"""FastAPI server runner."""

from __future__ import annotations

import argparse

import structlog
import uvicorn

from strategy_dashboard import __version__
from strategy_dashboard.api.app import create_app
from strategy_dashboard.config.loader import load_config
from strategy_dashboard.logging.setup import setup_logging_from_config

logger = structlog.get_logger()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Strategy dashboard API server")
    parser.add_argument("-s", "--config", help="Path to config.yaml")
    parser.add_argument("--frontend", help="Directory with the static dashboard frontend")
    parser.add_argument("--host", help="Bind address (overrides api.host)")
    parser.add_argument("--port", type=int, help="Bind port (overrides api.port)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run the FastAPI server."""
    args = parse_args(argv)
    config = load_config(args.config)
    if args.frontend:
        config.api.frontend_dir = args.frontend
    if args.host:
        config.api.host = args.host
    if args.port:
        config.api.port = args.port

    setup_logging_from_config(config.logging)
    logger.info("Strategy dashboard starting", version=__version__)
    logger.info("Settings", **config.model_dump(exclude={"database"}))

    app = create_app(config)

    try:
        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_config=None,  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    main()
