"""Liveness and listing statistics."""

from __future__ import annotations

from fastapi import APIRouter, Request

from estatesearch.api.schemas import StatsResponse

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/stats", response_model=StatsResponse)
def stats(request: Request) -> StatsResponse:
    """Listing counts, overall and per property type."""
    store = request.app.state.listing_store
    return StatsResponse(
        listing_count=store.count(),
        listings_by_type=store.count_by_type(),
    )
