"""CLI that runs a search page session against the listing store."""

from __future__ import annotations

import argparse
import asyncio
import logging

from estatesearch.client.http_fetcher import HttpListingFetcher
from estatesearch.client.local_fetcher import LocalListingFetcher
from estatesearch.config.logging_config import setup_logging
from estatesearch.config.settings import Settings, StoreClientSettings, get_settings
from estatesearch.errors import EstateSearchError
from estatesearch.search.home import fetch_home_feeds
from estatesearch.search.navigation import InMemoryHistory
from estatesearch.search.pagination import ListingFetcher, PaginationController
from estatesearch.search.query_string import split_location
from estatesearch.search.synchronizer import NO_RESULTS_MESSAGE, FilterStateSynchronizer, SearchView
from estatesearch.storage.listing_store import ListingStore
from estatesearch.storage.models import ListingSummary
from estatesearch.storage.schema import initialize_database


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(description="Search property listings.")
    parser.add_argument(
        "--query",
        default="",
        help="Search page query string, e.g. '?searchTerm=villa&type=sale'.",
    )
    parser.add_argument("--more", type=int, default=0, help="How many times to press 'Show more'.")
    parser.add_argument("--home", action="store_true", help="Print the home page feeds instead.")
    parser.add_argument(
        "--remote",
        default=None,
        help="Base URL of a listing API server. Defaults to the local database.",
    )
    return parser


def _build_fetcher(args: argparse.Namespace, settings: Settings) -> ListingFetcher:
    if args.remote:
        return HttpListingFetcher(StoreClientSettings(base_url=args.remote))
    initialize_database(settings.db_path)
    return LocalListingFetcher(ListingStore(settings.db_path))


def _format_listing(rank: int, listing: ListingSummary) -> str:
    flags = [name for name in ("offer", "parking", "furnished") if getattr(listing, name)]
    return (
        f"{rank}. [{listing.type}] {listing.name}, {listing.address} "
        f"price={listing.display_price:,.0f} {' '.join(flags)}".rstrip()
    )


async def run_search(
    fetcher: ListingFetcher,
    query: str,
    more: int,
    settings: Settings,
) -> SearchView:
    """Mount a search page at query, then press 'Show more' up to ``more`` times."""
    search_path = settings.search.search_path
    _, query_string = split_location(query)
    location = f"{search_path}?{query_string}" if query_string else search_path

    history = InMemoryHistory(location)
    controller = PaginationController(fetcher, page_size=settings.search.page_size)
    synchronizer = FilterStateSynchronizer(history, controller, search_path=search_path)

    synchronizer.mount()
    await synchronizer.wait_idle()
    for _ in range(more):
        if not synchronizer.view.show_more_visible:
            break
        await synchronizer.show_more()

    view = synchronizer.view
    synchronizer.unmount()
    return view


def _print_view(view: SearchView) -> None:
    if view.error:
        print(f"Error: {view.error}")
    if view.is_empty:
        print(NO_RESULTS_MESSAGE)
    for rank, listing in enumerate(view.listings, start=1):
        print(_format_listing(rank, listing))
    if view.show_more_visible:
        print("(more results may be available: use --more)")


async def _print_home(fetcher: ListingFetcher) -> None:
    feeds = await fetch_home_feeds(fetcher)
    for feed in feeds.values():
        print(f"== {feed.title} ({feed.search_location})")
        if feed.error:
            print(f"   {feed.error}")
        for rank, listing in enumerate(feed.listings, start=1):
            print("   " + _format_listing(rank, listing))


def main() -> int:
    """Run one search session and print the accumulated listings."""
    args = build_parser().parse_args()

    settings = get_settings()
    setup_logging(log_dir=settings.logs_dir)
    logger = logging.getLogger(__name__)

    try:
        fetcher = _build_fetcher(args, settings)
        if args.home:
            asyncio.run(_print_home(fetcher))
            return 0
        view = asyncio.run(run_search(fetcher, args.query, args.more, settings))
    except EstateSearchError as exc:
        logger.exception("Search failed: %s", exc)
        return 1

    _print_view(view)
    return 1 if view.error else 0


if __name__ == "__main__":
    raise SystemExit(main())
