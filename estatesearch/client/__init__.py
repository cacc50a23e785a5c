"""Listing fetchers: implementations of the page fetch contract."""

from estatesearch.client.http_fetcher import HttpListingFetcher
from estatesearch.client.local_fetcher import LocalListingFetcher

__all__ = [
    "HttpListingFetcher",
    "LocalListingFetcher",
]
