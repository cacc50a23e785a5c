"""
Keeps the search form, the URL and the result list in step.

- URL -> results: on mount and on every location change (including
  back/forward), the location is parsed into a FilterState and, if it
  describes a different search, a new pagination session is started.
- Form -> URL: form edits only touch the draft state; submitting
  serializes the draft and pushes a new history entry, which loops back
  through the first path.

Fetches run as tasks on the running event loop. Nothing here blocks.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from estatesearch.config.settings import get_settings
from estatesearch.search.filter_state import (
    DEFAULT_FILTER_STATE,
    FilterState,
    apply_form_change,
)
from estatesearch.search.navigation import NavigationPort
from estatesearch.search.pagination import FetchStatus, PaginationController
from estatesearch.search.query_string import build_search_path, parse, split_location
from estatesearch.storage.models import ListingSummary

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No listing found!"


@dataclass(frozen=True)
class SearchView:
    """Snapshot of everything the search page renders."""

    status: FetchStatus
    filters: FilterState
    draft: FilterState
    listings: tuple[ListingSummary, ...]
    show_more_visible: bool
    error: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @property
    def is_empty(self) -> bool:
        """Loaded with zero results: the page shows NO_RESULTS_MESSAGE."""
        return self.status is FetchStatus.LOADED and not self.listings


class FilterStateSynchronizer:
    """Binds a navigation port to a pagination controller."""

    def __init__(
        self,
        navigation: NavigationPort,
        controller: PaginationController,
        search_path: Optional[str] = None,
    ) -> None:
        self._navigation = navigation
        self._controller = controller
        self._search_path = search_path or get_settings().search.search_path
        self._filters: FilterState = DEFAULT_FILTER_STATE
        self._draft: FilterState = DEFAULT_FILTER_STATE
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def controller(self) -> PaginationController:
        return self._controller

    @property
    def filters(self) -> FilterState:
        """Filters parsed from the current URL."""
        return self._filters

    @property
    def draft(self) -> FilterState:
        """Filters as currently edited in the form, not yet submitted."""
        return self._draft

    @property
    def is_mounted(self) -> bool:
        return self._unsubscribe is not None

    @property
    def view(self) -> SearchView:
        controller = self._controller
        return SearchView(
            status=controller.status,
            filters=self._filters,
            draft=self._draft,
            listings=controller.listings,
            show_more_visible=controller.can_show_more,
            error=str(controller.error) if controller.error is not None else None,
        )

    # ----- Lifecycle -----

    def mount(self) -> asyncio.Task:
        """Read the current URL, start its session and follow location changes."""
        if self.is_mounted:
            raise RuntimeError("Synchronizer is already mounted")
        self._unsubscribe = self._navigation.subscribe(self._on_location_change)
        filters = parse(self._navigation.current_location())
        return self._start_session(filters)

    def unmount(self) -> None:
        """Stop following the URL. Responses still in flight are discarded."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._controller.reset()
        self._filters = DEFAULT_FILTER_STATE
        self._draft = DEFAULT_FILTER_STATE

    async def wait_idle(self) -> None:
        """Wait until every fetch started by a navigation has settled."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending)

    # ----- Form -----

    def change(self, input_id: str, value: Any) -> FilterState:
        """Apply one form input change to the draft."""
        self._draft = apply_form_change(self._draft, input_id, value)
        return self._draft

    def submit(self) -> str:
        """Push the draft to the URL as a new history entry. Returns the pushed location."""
        location = build_search_path(self._draft, self._search_path)
        self._navigation.push(location)
        return location

    async def show_more(self) -> bool:
        return await self._controller.show_more()

    # ----- Internals -----

    def _on_location_change(self, location: str) -> None:
        path, _ = split_location(location)
        if path and path != self._search_path:
            logger.debug("Ignoring navigation away from search: %s", location)
            return

        filters = parse(location)
        restart = self._controller.status in (FetchStatus.IDLE, FetchStatus.ERRORED)
        if filters.same_session(self._filters) and not restart:
            # Same search, e.g. resubmitting unchanged filters
            self._draft = self._filters
            return
        self._start_session(filters)

    def _start_session(self, filters: FilterState) -> asyncio.Task:
        self._filters = filters
        self._draft = filters
        generation = self._controller.start_session(filters)
        task = asyncio.get_running_loop().create_task(
            self._controller.load_first_page(generation)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
