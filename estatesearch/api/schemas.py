"""Pydantic response models for the listing store API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ListingResponse(BaseModel):
    """A listing in the camelCase wire format."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    description: str = ""
    address: str = ""
    regular_price: float = Field(default=0.0, alias="regularPrice")
    discount_price: float = Field(default=0.0, alias="discountPrice")
    bathrooms: int = 1
    bedrooms: int = 1
    furnished: bool = False
    parking: bool = False
    type: str = "rent"
    offer: bool = False
    image_urls: list[str] = Field(default_factory=list, alias="imageUrls")
    user_ref: Optional[str] = Field(default=None, alias="userRef")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class StatsResponse(BaseModel):
    """Store statistics."""

    listing_count: int
    listings_by_type: dict[str, int] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
