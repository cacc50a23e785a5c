"""In-process fetcher that queries the SQLite listing store directly."""

from __future__ import annotations

import asyncio
import sqlite3

from estatesearch.errors import StoreFetchError
from estatesearch.search.filter_state import FilterState
from estatesearch.search.query_compiler import compile_query
from estatesearch.storage.listing_store import ListingStore
from estatesearch.storage.models import ListingSummary


class LocalListingFetcher:
    """Same contract as HttpListingFetcher, without the network hop."""

    def __init__(self, store: ListingStore) -> None:
        self._store = store

    async def fetch_page(self, filters: FilterState, skip: int, limit: int) -> list[ListingSummary]:
        query = compile_query(filters, limit=limit, skip=skip)
        try:
            listings = await asyncio.to_thread(self._store.search, query)
        except sqlite3.Error as exc:
            raise StoreFetchError(f"Listing store query failed: {exc}") from exc
        return [listing.summary() for listing in listings]
