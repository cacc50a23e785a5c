"""CLI to seed the listing store from a JSON file."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from estatesearch.config.logging_config import setup_logging
from estatesearch.config.settings import get_settings
from estatesearch.storage.listing_store import ListingStore
from estatesearch.storage.models import Listing
from estatesearch.storage.schema import initialize_database


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load listings into the listing store.")
    parser.add_argument(
        "--file",
        required=True,
        type=Path,
        help="JSON array of listings using the API field names (_id, name, regularPrice, ...).",
    )
    return parser


def load_listings(path: Path) -> list[Listing]:
    """Read a JSON array of wire-format listings."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of listings")
    return [Listing.from_wire(item) for item in data]


def main() -> int:
    args = build_parser().parse_args()

    settings = get_settings()
    setup_logging(log_dir=settings.logs_dir)
    initialize_database(settings.db_path)
    logger = logging.getLogger(__name__)

    try:
        listings = load_listings(args.file)
    except (OSError, ValueError, KeyError) as exc:
        logger.exception("Could not read listings from %s: %s", args.file, exc)
        return 1

    inserted = ListingStore(settings.db_path).insert_many(listings)
    print(f"Inserted {inserted} of {len(listings)} listings.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
