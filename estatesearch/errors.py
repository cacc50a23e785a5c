"""Exception types shared across the search, storage and client layers."""

from __future__ import annotations


class EstateSearchError(Exception):
    """Base class for all estatesearch errors."""


class StoreFetchError(EstateSearchError):
    """A page of listings could not be fetched from the listing store."""


class ListingNotFoundError(EstateSearchError):
    """No listing exists with the requested id."""

    def __init__(self, listing_id: str) -> None:
        super().__init__(f"Listing not found: {listing_id}")
        self.listing_id = listing_id
