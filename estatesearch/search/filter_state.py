"""
The in-memory representation of what the user is searching for.

A ``FilterState`` is immutable: every form edit, URL parse or page load
produces a new instance. Every field except ``cursor`` is always fully
defined; parsing fills missing values with the defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class PropertyType(str, Enum):
    """Mutually exclusive listing type selector."""

    ALL = "all"
    RENT = "rent"
    SALE = "sale"


class SortField(str, Enum):
    CREATED_AT = "createdAt"
    REGULAR_PRICE = "regularPrice"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def coerce_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Any:
    """Return the member of enum_cls whose value equals value, else default."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class FilterState:
    """
    The user's search intent plus the pagination cursor.

    ``parking``, ``furnished`` and ``offer`` are plain booleans: an absent
    URL key and an explicit ``false`` are the same state, and ``False``
    means "don't care" when the query is compiled, never "must be false".

    ``cursor`` counts the records already loaded for the current filter
    session. It is never written to the URL.
    """

    search_term: str = ""
    property_type: PropertyType = PropertyType.ALL
    parking: bool = False
    furnished: bool = False
    offer: bool = False
    sort_field: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    cursor: int = 0

    def __post_init__(self) -> None:
        if self.cursor < 0:
            raise ValueError(f"cursor must be >= 0, got {self.cursor}")

    def with_cursor(self, cursor: int) -> "FilterState":
        return replace(self, cursor=cursor)

    def without_cursor(self) -> "FilterState":
        """The same filters at the start of their session."""
        return replace(self, cursor=0)

    def same_session(self, other: "FilterState") -> bool:
        """True when both states describe the same search, whatever their cursors."""
        return self.without_cursor() == other.without_cursor()


DEFAULT_FILTER_STATE = FilterState()


# ---------------------------------------------------------------------------
# Form inputs
# ---------------------------------------------------------------------------

TYPE_INPUT_IDS = frozenset(t.value for t in PropertyType)
FLAG_INPUT_IDS = frozenset({"parking", "furnished", "offer"})
SEARCH_TERM_INPUT_ID = "searchTerm"
SORT_INPUT_ID = "sort_order"


def sort_option(state: FilterState) -> str:
    """Combined sort select value, e.g. ``"regularPrice_asc"``."""
    return f"{state.sort_field.value}_{state.sort_order.value}"


def parse_sort_option(value: str) -> tuple[SortField, SortOrder]:
    """
    Split a combined sort select value into field and order.

    Anything that is not exactly ``<known field>_<known order>`` yields
    the default ``createdAt``/``desc`` pair.
    """
    field_name, sep, order = (value or "").rpartition("_")
    if not sep:
        return SortField.CREATED_AT, SortOrder.DESC
    sort_field = coerce_enum(SortField, field_name, None)
    sort_order = coerce_enum(SortOrder, order, None)
    if sort_field is None or sort_order is None:
        return SortField.CREATED_AT, SortOrder.DESC
    return sort_field, sort_order


def apply_form_change(state: FilterState, input_id: str, value: Any) -> FilterState:
    """
    Apply one controlled-input change from the search form.

    Input ids:
        searchTerm               text value
        all / rent / sale        type selectors; activating one selects it
        parking / furnished / offer
                                 checkboxes; value is the checked state
        sort_order               combined select value, see sort_option()

    Unknown ids leave the filters untouched. The returned state always
    starts a fresh session (cursor 0).
    """
    if input_id == SEARCH_TERM_INPUT_ID:
        state = replace(state, search_term="" if value is None else str(value))
    elif input_id in TYPE_INPUT_IDS:
        state = replace(state, property_type=PropertyType(input_id))
    elif input_id in FLAG_INPUT_IDS:
        state = replace(state, **{input_id: bool(value)})
    elif input_id == SORT_INPUT_ID:
        sort_field, sort_order = parse_sort_option(str(value))
        state = replace(state, sort_field=sort_field, sort_order=sort_order)
    return state.without_cursor()
