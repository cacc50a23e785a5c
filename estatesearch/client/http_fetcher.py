"""HTTP client for the listing store API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from estatesearch.config.settings import StoreClientSettings, get_settings
from estatesearch.errors import ListingNotFoundError, StoreFetchError
from estatesearch.search.filter_state import FilterState
from estatesearch.search.query_compiler import compile_query
from estatesearch.storage.models import ListingSummary

logger = logging.getLogger(__name__)


class HttpListingFetcher:
    """
    Fetches listing pages over HTTP.

    Requests are blocking (``requests``) and run in a worker thread so the
    event loop stays free. Failures are not retried here; every transport
    error, timeout, error status or malformed body becomes a
    StoreFetchError and the caller decides what to show.
    """

    def __init__(
        self,
        settings: Optional[StoreClientSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or get_settings().store_client
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self._settings.user_agent})

    @property
    def listing_url(self) -> str:
        return self._settings.base_url.rstrip("/") + self._settings.listing_path

    async def fetch_page(self, filters: FilterState, skip: int, limit: int) -> list[ListingSummary]:
        return await asyncio.to_thread(self.fetch_page_sync, filters, skip, limit)

    def fetch_page_sync(self, filters: FilterState, skip: int, limit: int) -> list[ListingSummary]:
        """Blocking variant of fetch_page."""
        params = compile_query(filters, limit=limit, skip=skip).to_params()
        data = self._get_json(self.listing_url, params)
        if not isinstance(data, list):
            raise StoreFetchError(
                f"Expected a JSON array from {self.listing_url}, got {type(data).__name__}"
            )
        try:
            listings = [ListingSummary.from_wire(item) for item in data]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreFetchError(f"Malformed listing in response: {exc}") from exc
        logger.debug("Fetched %d listings (skip=%d, limit=%d)", len(listings), skip, limit)
        return listings

    def get_listing(self, listing_id: str) -> ListingSummary:
        """Fetch one listing by id. Raises ListingNotFoundError on 404."""
        url = f"{self.listing_url}/{quote(listing_id, safe='')}"
        data = self._get_json(url, None, not_found_id=listing_id)
        try:
            return ListingSummary.from_wire(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreFetchError(f"Malformed listing in response: {exc}") from exc

    def close(self) -> None:
        self._session.close()

    def _get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]],
        not_found_id: Optional[str] = None,
    ) -> Any:
        try:
            response = self._session.get(
                url, params=params, timeout=self._settings.request_timeout
            )
        except requests.RequestException as exc:
            raise StoreFetchError(f"Request to {url} failed: {exc}") from exc

        if response.status_code == 404 and not_found_id is not None:
            raise ListingNotFoundError(not_found_id)

        if response.status_code >= 400:
            raise StoreFetchError(
                f"HTTP request failed with status {response.status_code} for URL: {url}"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise StoreFetchError(f"Response from {url} is not valid JSON") from exc
