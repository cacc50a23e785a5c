"""
URL query string <-> FilterState mapping.

``parse`` and ``serialize`` are near-inverses: for any state reachable
through the form, ``parse(serialize(s)) == s`` (cursor aside, which is
never part of the URL). Parsing never raises; every malformed or missing
key degrades to its default independently of the others, and unknown
keys are ignored.

The key order emitted by ``serialize`` is part of the external interface:
    searchTerm, type, parking, furnished, offer, sort, order
"""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from estatesearch.search.filter_state import (
    DEFAULT_FILTER_STATE,
    FilterState,
    PropertyType,
    SortField,
    SortOrder,
    coerce_enum,
)

# Wire keys, in serialization order
QUERY_KEYS: tuple[str, ...] = (
    "searchTerm",
    "type",
    "parking",
    "furnished",
    "offer",
    "sort",
    "order",
)


def split_location(location: str) -> tuple[str, str]:
    """
    Split a location into (path, query string without ``?``).

    Accepts a full URL, a path with a query (``/search?type=rent``), a bare
    query with or without its leading ``?``, or an empty string.
    """
    if not location:
        return "", ""
    if "?" in location or location.startswith("/") or "://" in location:
        parts = urlsplit(location)
        return parts.path, parts.query
    return "", location


def parse_bool(value: str | None) -> bool:
    """Only the literal ``"true"`` is true; ``"false"``, garbage and absence are false."""
    return value == "true"


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def _first_values(query_string: str) -> dict[str, str]:
    """First value per key, blank values kept (``searchTerm=`` is a real empty term)."""
    values: dict[str, str] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        values.setdefault(key, value)
    return values


def parse(query_string: str) -> FilterState:
    """
    Parse a query string (or a location containing one) into a FilterState.

    The result is always a session start: cursor is 0.
    """
    _, query = split_location(query_string or "")
    return parse_values(_first_values(query))


def parse_values(values: Mapping[str, Optional[str]]) -> FilterState:
    """Build a FilterState from already-decoded query values, one string per key."""
    defaults = DEFAULT_FILTER_STATE
    search_term = values.get("searchTerm")

    return FilterState(
        search_term=defaults.search_term if search_term is None else search_term,
        property_type=coerce_enum(PropertyType, values.get("type"), defaults.property_type),
        parking=parse_bool(values.get("parking")),
        furnished=parse_bool(values.get("furnished")),
        offer=parse_bool(values.get("offer")),
        sort_field=coerce_enum(SortField, values.get("sort"), defaults.sort_field),
        sort_order=coerce_enum(SortOrder, values.get("order"), defaults.sort_order),
    )


def serialize(state: FilterState) -> str:
    """Serialize filters to a query string (no leading ``?``) in the fixed key order."""
    pairs = [
        ("searchTerm", state.search_term),
        ("type", state.property_type.value),
        ("parking", format_bool(state.parking)),
        ("furnished", format_bool(state.furnished)),
        ("offer", format_bool(state.offer)),
        ("sort", state.sort_field.value),
        ("order", state.sort_order.value),
    ]
    return urlencode(pairs)


def build_search_path(state: FilterState, path: str = "/search") -> str:
    """The location the search form navigates to on submit."""
    return f"{path}?{serialize(state)}"
