"""
Shared test fixtures for the estatesearch test suite.

Provides an isolated SQLite database per test via a temporary file,
sample data factories, and fake listing fetchers for the async search
flow.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import pytest

from estatesearch.errors import StoreFetchError
from estatesearch.search.filter_state import FilterState
from estatesearch.storage.connection import close_connection, get_connection
from estatesearch.storage.listing_store import ListingStore
from estatesearch.storage.models import Listing, ListingSummary
from estatesearch.storage.schema import initialize_database


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Temporary SQLite database path, cleaned up by pytest's tmp_path."""
    return tmp_path / "test_estatesearch.db"


@pytest.fixture
def db(db_path: Path):
    """Initialized database connection; closed after the test."""
    initialize_database(db_path)
    conn = get_connection(db_path)
    yield conn
    close_connection(db_path)


@pytest.fixture
def listing_store(db, db_path: Path) -> ListingStore:
    """A ListingStore connected to the test database."""
    return ListingStore(db_path)


# ---------------------------------------------------------------------------
# Sample data factories
# ---------------------------------------------------------------------------


def make_listing(
    listing_id: str = "l001",
    name: str = "Test Listing",
    **kwargs,
) -> Listing:
    """Create a Listing with sensible defaults. Override any field via kwargs."""
    defaults = dict(
        id=listing_id,
        name=name,
        description="A nice place",
        address="123 Test St",
        regular_price=1000.0,
        discount_price=900.0,
        bathrooms=1,
        bedrooms=2,
        furnished=False,
        parking=False,
        type="rent",
        offer=False,
        image_urls=["test1.jpg"],
        user_ref="user-1",
        created_at="2025-01-01T00:00:00+00:00",
        updated_at="2025-01-01T00:00:00+00:00",
    )
    defaults.update(kwargs)
    return Listing(**defaults)


def make_listings(count: int, prefix: str = "l", **kwargs) -> list[Listing]:
    """``count`` listings with distinct ids and strictly increasing created_at."""
    return [
        make_listing(
            listing_id=f"{prefix}{i:03d}",
            name=f"Listing {i}",
            created_at=f"2025-01-01T00:{i // 60:02d}:{i % 60:02d}+00:00",
            **kwargs,
        )
        for i in range(count)
    ]


def make_summaries(count: int, prefix: str = "s") -> list[ListingSummary]:
    return [ListingSummary(id=f"{prefix}{i}", name=f"{prefix.upper()} listing {i}") for i in range(count)]


# ---------------------------------------------------------------------------
# Fake fetchers
# ---------------------------------------------------------------------------


class FakeFetcher:
    """Serves slices of a fixed result list and records every call."""

    def __init__(self, listings: Optional[list[ListingSummary]] = None) -> None:
        self.listings = list(listings or [])
        self.calls: list[tuple[FilterState, int, int]] = []
        self.failures: list[StoreFetchError] = []

    def fail_next(self, message: str = "store unavailable") -> None:
        self.failures.append(StoreFetchError(message))

    async def fetch_page(self, filters: FilterState, skip: int, limit: int) -> list[ListingSummary]:
        self.calls.append((filters, skip, limit))
        if self.failures:
            raise self.failures.pop(0)
        return self.listings[skip: skip + limit]


class GatedFetcher:
    """
    Every call blocks until the test resolves it, so tests control the
    order in which responses arrive.
    """

    def __init__(self) -> None:
        self.pending: list[tuple[FilterState, int, int, asyncio.Future]] = []

    async def fetch_page(self, filters: FilterState, skip: int, limit: int) -> list[ListingSummary]:
        future = asyncio.get_running_loop().create_future()
        self.pending.append((filters, skip, limit, future))
        return await future

    def resolve(self, index: int, listings: list[ListingSummary]) -> None:
        self.pending[index][3].set_result(listings)

    def fail(self, index: int, message: str = "store unavailable") -> None:
        self.pending[index][3].set_exception(StoreFetchError(message))


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def gated_fetcher() -> GatedFetcher:
    return GatedFetcher()
