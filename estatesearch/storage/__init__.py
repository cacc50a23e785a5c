from estatesearch.storage.models import Listing, ListingSummary
from estatesearch.storage.connection import get_connection, close_connection
from estatesearch.storage.schema import initialize_database
from estatesearch.storage.listing_store import ListingStore

__all__ = [
    "Listing",
    "ListingSummary",
    "get_connection",
    "close_connection",
    "initialize_database",
    "ListingStore",
]
