"""
Compile a FilterState into a listing store query.

The compiled ``StoreQuery`` has two renderings:

- ``to_params()``: the request parameters of the listing store API,
  sent by the HTTP client;
- ``to_sql()``: the statement the SQLite listing store executes, i.e.
  the server-side interpretation of those same parameters.

Interpretation rules:

- ``search_term`` is a case-insensitive substring match on the listing
  name, compared after Unicode case folding (``str.casefold``, registered
  on the connection as the SQL function ``casefold``). Empty matches all.
- ``property_type`` restricts to that type; ``all`` does not restrict.
- ``parking``/``furnished``/``offer`` restrict only when true. False means
  "don't care": unchecking a box stops requiring the flag, it never
  excludes listings that have it.
- Sorting uses one key only. Rows with equal sort keys come back in the
  store's natural order, which is not guaranteed to be stable between
  requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from estatesearch.search.filter_state import FilterState, PropertyType, SortField, SortOrder
from estatesearch.search.query_string import format_bool

# Boolean facets in wire order. Column names match the wire keys.
FLAG_FIELDS: tuple[str, ...] = ("parking", "furnished", "offer")

_SORT_COLUMNS = {
    SortField.CREATED_AT: "created_at",
    SortField.REGULAR_PRICE: "regular_price",
}


@dataclass(frozen=True)
class StoreQuery:
    """A fully resolved listing query with explicit paging."""

    search_term: str
    # None means every type
    property_type: Optional[PropertyType]
    # Facets that must be set on a listing, subset of FLAG_FIELDS
    required_flags: tuple[str, ...]
    sort_field: SortField
    sort_order: SortOrder
    skip: int
    limit: int

    def to_params(self) -> dict[str, Any]:
        """Listing store API parameters, in wire order."""
        params: dict[str, Any] = {
            "searchTerm": self.search_term,
            "type": (self.property_type or PropertyType.ALL).value,
        }
        for flag in FLAG_FIELDS:
            params[flag] = format_bool(flag in self.required_flags)
        params["sort"] = self.sort_field.value
        params["order"] = self.sort_order.value
        params["startIndex"] = self.skip
        params["limit"] = self.limit
        return params

    def to_sql(self) -> tuple[str, list[Any]]:
        """SELECT statement and bound arguments for the ``listings`` table."""
        clauses: list[str] = []
        args: list[Any] = []

        if self.search_term:
            # instr matches literally, so % and _ need no escaping
            clauses.append("instr(casefold(name), ?) > 0")
            args.append(self.search_term.casefold())

        if self.property_type is not None:
            clauses.append("type = ?")
            args.append(self.property_type.value)

        for flag in self.required_flags:
            clauses.append(f"{flag} = 1")

        where = " AND ".join(clauses) if clauses else "1 = 1"
        column = _SORT_COLUMNS[self.sort_field]
        direction = "ASC" if self.sort_order is SortOrder.ASC else "DESC"

        sql = (
            f"SELECT * FROM listings WHERE {where} "
            f"ORDER BY {column} {direction} LIMIT ? OFFSET ?"
        )
        args.extend([self.limit, self.skip])
        return sql, args


def compile_query(
    filters: FilterState,
    limit: int,
    skip: Optional[int] = None,
) -> StoreQuery:
    """
    Translate filters into a StoreQuery.

    ``skip`` defaults to the filters' cursor, so compiling the controller's
    current state yields the request for the next page.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    skip = filters.cursor if skip is None else skip
    if skip < 0:
        raise ValueError(f"skip must be >= 0, got {skip}")

    property_type = None if filters.property_type is PropertyType.ALL else filters.property_type
    required_flags = tuple(flag for flag in FLAG_FIELDS if getattr(filters, flag))

    return StoreQuery(
        search_term=filters.search_term,
        property_type=property_type,
        required_flags=required_flags,
        sort_field=filters.sort_field,
        sort_order=filters.sort_order,
        skip=skip,
        limit=limit,
    )
