"""Listing query routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request

from estatesearch.api.schemas import ErrorResponse, ListingResponse
from estatesearch.errors import ListingNotFoundError
from estatesearch.search.query_compiler import compile_query
from estatesearch.search.query_string import parse_values

router = APIRouter(prefix="/api/listing", tags=["listing"])


@router.get("/get", response_model=list[ListingResponse])
def get_listings(
    request: Request,
    search_term: Optional[str] = Query(None, alias="searchTerm", description="Substring of the listing name"),
    type_: Optional[str] = Query(None, alias="type", description="all, rent or sale"),
    parking: Optional[str] = Query(None, description="'true' to require parking"),
    furnished: Optional[str] = Query(None, description="'true' to require furnishing"),
    offer: Optional[str] = Query(None, description="'true' to require an offer"),
    sort: Optional[str] = Query(None, description="createdAt or regularPrice"),
    order: Optional[str] = Query(None, description="asc or desc"),
    start_index: int = Query(0, ge=0, alias="startIndex", description="Records to skip"),
    limit: Optional[int] = Query(None, ge=1, description="Page size"),
) -> list[ListingResponse]:
    """
    Return one page of matching listings as a JSON array.

    Filter values are interpreted exactly like the search page's URL:
    unknown values fall back to defaults, and boolean facets restrict
    only when ``true``.
    """
    settings = request.app.state.settings.search
    store = request.app.state.listing_store

    filters = parse_values(
        {
            "searchTerm": (search_term or "")[: settings.max_search_term_length],
            "type": type_,
            "parking": parking,
            "furnished": furnished,
            "offer": offer,
            "sort": sort,
            "order": order,
        }
    )
    page_size = min(limit or settings.page_size, settings.max_page_size)
    query = compile_query(filters, limit=page_size, skip=start_index)

    return [ListingResponse.model_validate(listing.to_wire()) for listing in store.search(query)]


@router.get(
    "/get/{listing_id}",
    response_model=ListingResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_listing(request: Request, listing_id: str) -> ListingResponse:
    """Return a single listing."""
    listing = request.app.state.listing_store.get_by_id(listing_id)
    if listing is None:
        raise ListingNotFoundError(listing_id)
    return ListingResponse.model_validate(listing.to_wire())
