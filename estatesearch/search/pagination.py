"""
Incremental result loading for one search component.

The controller owns the fetch lifecycle of a filter session:

    IDLE -> LOADING -> LOADED | ERRORED
    LOADED -> LOADING_MORE -> LOADED | ERRORED
    ERRORED (after a failed "show more") -> LOADING_MORE (retry)

Every session gets a new generation number. A response is applied only if
its generation is still the current one when it arrives, so a slow request
from an earlier session can never overwrite fresher results. Superseded
requests are not cancelled; their results are dropped.

Whether more results exist is a heuristic: the store returns no total, so
a page that came back full (``len(page) > page_size - 1``) is taken to
mean another page may follow. A full last page therefore yields one extra
"show more" that returns nothing, after which the action is hidden.

All mutation happens on the event loop thread; no locking is needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

from estatesearch.config.settings import get_settings
from estatesearch.errors import StoreFetchError
from estatesearch.search.filter_state import FilterState
from estatesearch.search.query_string import serialize
from estatesearch.storage.models import ListingSummary

logger = logging.getLogger(__name__)


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOADING_MORE = "loading_more"
    ERRORED = "errored"


class ListingFetcher(Protocol):
    """Capability to fetch one ordered slice of matching listings."""

    async def fetch_page(
        self, filters: FilterState, skip: int, limit: int
    ) -> Sequence[ListingSummary]:
        ...


def page_may_have_more(page_length: int, page_size: int) -> bool:
    """True when a page came back full, so the store may hold more records."""
    return page_length > page_size - 1


@dataclass(frozen=True)
class ResultPage:
    """One fetched page and what it implies about the next one."""

    listings: tuple[ListingSummary, ...]
    may_have_more: bool

    @classmethod
    def from_listings(cls, listings: Sequence[ListingSummary], page_size: int) -> "ResultPage":
        return cls(
            listings=tuple(listings),
            may_have_more=page_may_have_more(len(listings), page_size),
        )


class PaginationController:
    """
    Accumulates result pages for the current filter session.

    Typical use:
        controller = PaginationController(fetcher)
        await controller.load(filters)
        while controller.can_show_more:
            await controller.show_more()
    """

    def __init__(self, fetcher: ListingFetcher, page_size: Optional[int] = None) -> None:
        self._fetcher = fetcher
        self._page_size = page_size if page_size is not None else get_settings().search.page_size
        if self._page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self._page_size}")

        self._generation = 0
        self._first_page_requested = 0
        self._status = FetchStatus.IDLE
        self._filters: Optional[FilterState] = None
        self._listings: list[ListingSummary] = []
        self._last_page: Optional[ResultPage] = None
        self._error: Optional[StoreFetchError] = None

    # ----- Read-only state -----

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def status(self) -> FetchStatus:
        return self._status

    @property
    def filters(self) -> Optional[FilterState]:
        """Filters of the current session; the cursor is the number of listings loaded."""
        return self._filters

    @property
    def cursor(self) -> int:
        return self._filters.cursor if self._filters is not None else 0

    @property
    def listings(self) -> tuple[ListingSummary, ...]:
        return tuple(self._listings)

    @property
    def last_page(self) -> Optional[ResultPage]:
        return self._last_page

    @property
    def may_have_more(self) -> bool:
        return self._last_page is not None and self._last_page.may_have_more

    @property
    def error(self) -> Optional[StoreFetchError]:
        return self._error

    @property
    def is_fetching(self) -> bool:
        return self._status in (FetchStatus.LOADING, FetchStatus.LOADING_MORE)

    @property
    def can_show_more(self) -> bool:
        """Show more is offered after a full page, and again after a failed attempt."""
        return (
            self._status in (FetchStatus.LOADED, FetchStatus.ERRORED)
            and self.may_have_more
        )

    # ----- Session lifecycle -----

    def start_session(self, filters: FilterState) -> int:
        """
        Begin a new filter session and return its generation.

        Results of the previous session are dropped immediately and any of
        its responses still in flight will be discarded on arrival.
        """
        self._generation += 1
        self._filters = filters.without_cursor()
        self._listings = []
        self._last_page = None
        self._error = None
        self._status = FetchStatus.LOADING
        logger.info("Filter session %d started: %s", self._generation, serialize(self._filters))
        return self._generation

    async def load_first_page(self, generation: int) -> bool:
        """Fetch page one of the session started as ``generation``. Returns True if applied."""
        if self._is_stale(generation) or self._filters is None:
            return False
        if self._first_page_requested == generation:
            return False
        self._first_page_requested = generation
        return await self._fetch(generation, self._filters, failure_keeps_page=False)

    async def load(self, filters: FilterState) -> bool:
        """Start a new session for filters and fetch its first page."""
        generation = self.start_session(filters)
        return await self.load_first_page(generation)

    async def show_more(self) -> bool:
        """
        Fetch the next page and append it.

        A no-op returning False when no more results are expected or a fetch
        is already in flight; repeated clicks are neither queued nor errors.
        """
        if not self.can_show_more or self._filters is None:
            logger.debug(
                "Show more ignored (status=%s, may_have_more=%s)",
                self._status.value, self.may_have_more,
            )
            return False

        generation = self._generation
        self._status = FetchStatus.LOADING_MORE
        self._error = None
        return await self._fetch(generation, self._filters, failure_keeps_page=True)

    def reset(self) -> None:
        """Forget everything, e.g. when the search view goes away."""
        self._generation += 1
        self._status = FetchStatus.IDLE
        self._filters = None
        self._listings = []
        self._last_page = None
        self._error = None

    # ----- Internals -----

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def _fetch(self, generation: int, filters: FilterState, failure_keeps_page: bool) -> bool:
        skip = filters.cursor
        try:
            listings = await self._fetcher.fetch_page(filters, skip, self._page_size)
        except StoreFetchError as exc:
            if self._is_stale(generation):
                logger.debug("Discarded failure of stale generation %d", generation)
                return False
            logger.warning(
                "Listing fetch failed (generation=%d, skip=%d): %s", generation, skip, exc
            )
            self._error = exc
            self._status = FetchStatus.ERRORED
            if not failure_keeps_page:
                self._last_page = None
            return False

        if self._is_stale(generation):
            logger.debug(
                "Discarded stale page of %d listings (generation %d, current %d)",
                len(listings), generation, self._generation,
            )
            return False

        page = ResultPage.from_listings(listings, self._page_size)
        self._listings.extend(page.listings)
        self._filters = filters.with_cursor(len(self._listings))
        self._last_page = page
        self._status = FetchStatus.LOADED
        logger.debug(
            "Applied page (generation=%d, skip=%d, size=%d, may_have_more=%s)",
            generation, skip, len(page.listings), page.may_have_more,
        )
        return True
