"""Run the listing API under uvicorn."""

from __future__ import annotations

import argparse
import logging
from urllib.parse import urlsplit

import uvicorn

from estatesearch.config.logging_config import setup_logging
from estatesearch.config.settings import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve listing queries for the search page.",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Bind address. Defaults to the host of the configured store base URL.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port. Defaults to the port of the configured store base URL.",
    )
    parser.add_argument("--reload", action="store_true", help="Restart on code changes.")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level.")
    return parser


def main() -> int:
    args = build_parser().parse_args()

    settings = get_settings()
    setup_logging(
        log_dir=settings.logs_dir,
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file="estatesearch-api.log",
    )
    logger = logging.getLogger(__name__)

    # Serve where HttpListingFetcher will look unless told otherwise
    default = urlsplit(settings.store_client.base_url)
    host = args.host or default.hostname or "127.0.0.1"
    port = args.port or default.port or 8000

    logger.info("Serving %s on %s:%d", settings.store_client.listing_path, host, port)
    uvicorn.run(
        "estatesearch.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level="debug" if args.verbose else "info",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
