"""Search flow: filter state, URL codec, query compilation, pagination and URL sync."""

from estatesearch.search.filter_state import (
    DEFAULT_FILTER_STATE,
    FilterState,
    PropertyType,
    SortField,
    SortOrder,
    apply_form_change,
)
from estatesearch.search.query_string import build_search_path, parse, serialize
from estatesearch.search.query_compiler import StoreQuery, compile_query
from estatesearch.search.pagination import (
    FetchStatus,
    ListingFetcher,
    PaginationController,
    ResultPage,
)
from estatesearch.search.navigation import InMemoryHistory, NavigationPort
from estatesearch.search.synchronizer import FilterStateSynchronizer, SearchView

__all__ = [
    "DEFAULT_FILTER_STATE",
    "FilterState",
    "PropertyType",
    "SortField",
    "SortOrder",
    "apply_form_change",
    "build_search_path",
    "parse",
    "serialize",
    "StoreQuery",
    "compile_query",
    "FetchStatus",
    "ListingFetcher",
    "PaginationController",
    "ResultPage",
    "InMemoryHistory",
    "NavigationPort",
    "FilterStateSynchronizer",
    "SearchView",
]
