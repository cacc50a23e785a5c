"""Curated listing feeds for the landing page: recent offers, rentals and sales."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from estatesearch.config.settings import get_settings
from estatesearch.errors import StoreFetchError
from estatesearch.search.filter_state import FilterState, PropertyType
from estatesearch.search.pagination import ListingFetcher
from estatesearch.search.query_string import build_search_path
from estatesearch.storage.models import ListingSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedDefinition:
    key: str
    title: str
    filters: FilterState
    error_message: str


HOME_FEEDS: tuple[FeedDefinition, ...] = (
    FeedDefinition(
        key="offer",
        title="Recent offers",
        filters=FilterState(offer=True),
        error_message="Failed to fetch offer listings",
    ),
    FeedDefinition(
        key="rent",
        title="Recent places for rent",
        filters=FilterState(property_type=PropertyType.RENT),
        error_message="Failed to fetch rental listings",
    ),
    FeedDefinition(
        key="sale",
        title="Recent places for sale",
        filters=FilterState(property_type=PropertyType.SALE),
        error_message="Failed to fetch sale listings",
    ),
)


@dataclass(frozen=True)
class HomeFeed:
    key: str
    title: str
    listings: tuple[ListingSummary, ...]
    # Where "show more" on this feed leads
    search_location: str
    error: Optional[str] = None


async def fetch_home_feeds(
    fetcher: ListingFetcher,
    limit: Optional[int] = None,
    search_path: Optional[str] = None,
) -> dict[str, HomeFeed]:
    """
    Fetch all home feeds concurrently.

    Feeds fail independently: a failed feed comes back empty with its own
    error message while the others are still shown.
    """
    settings = get_settings().search
    limit = limit or settings.home_feed_limit
    search_path = search_path or settings.search_path

    results = await asyncio.gather(
        *(fetcher.fetch_page(definition.filters, 0, limit) for definition in HOME_FEEDS),
        return_exceptions=True,
    )

    feeds: dict[str, HomeFeed] = {}
    for definition, result in zip(HOME_FEEDS, results):
        location = build_search_path(definition.filters, search_path)
        if isinstance(result, StoreFetchError):
            logger.warning("Home feed '%s' failed: %s", definition.key, result)
            feeds[definition.key] = HomeFeed(
                key=definition.key,
                title=definition.title,
                listings=(),
                search_location=location,
                error=definition.error_message,
            )
        elif isinstance(result, BaseException):
            raise result
        else:
            feeds[definition.key] = HomeFeed(
                key=definition.key,
                title=definition.title,
                listings=tuple(result),
                search_location=location,
            )
    return feeds
