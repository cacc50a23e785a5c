"""
Data models for the estatesearch storage layer.

These are plain dataclasses with no ORM. ``Listing`` maps 1:1 to a
row of the ``listings`` table. ``ListingSummary`` is the read-only
projection the search flow accumulates; it is what a page fetch returns.

No business logic lives here beyond converting to and from the
camelCase wire format used by the listing store API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def _utc_now_iso() -> str:
    """ISO 8601 timestamp in UTC, used as default for created/updated timestamps."""
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Listings: full records owned by the listing store
# ---------------------------------------------------------------------------


@dataclass
class Listing:
    """
    A property listing as stored in the ``listings`` table.

    Listings are created and edited outside the search flow; the search
    side only ever reads them.
    """

    # Opaque listing id. Primary key.
    id: str

    # Listing title, matched by the free-text search term
    name: str

    # Street address shown on result cards
    address: str = ""

    description: str = ""

    # Asking price (monthly rent or sale price, depending on type)
    regular_price: float = 0.0

    # Discounted price, meaningful only when offer is set
    discount_price: float = 0.0

    bathrooms: int = 1
    bedrooms: int = 1

    furnished: bool = False
    parking: bool = False

    # "rent" or "sale"
    type: str = "rent"

    # True when the listing is advertised with a discount
    offer: bool = False

    # Image URLs, first one is the cover
    image_urls: list[str] = field(default_factory=list)

    # Id of the user that owns the listing
    user_ref: Optional[str] = None

    # ISO 8601 timestamps
    created_at: str = field(default_factory=_utc_now_iso)
    updated_at: str = field(default_factory=_utc_now_iso)

    def summary(self) -> "ListingSummary":
        """Project this record onto the fields the search results need."""
        return ListingSummary(
            id=self.id,
            name=self.name,
            address=self.address,
            type=self.type,
            regular_price=self.regular_price,
            discount_price=self.discount_price,
            offer=self.offer,
            parking=self.parking,
            furnished=self.furnished,
            bedrooms=self.bedrooms,
            bathrooms=self.bathrooms,
            image_urls=tuple(self.image_urls),
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape of the listing store API."""
        return {
            "_id": self.id,
            "name": self.name,
            "description": self.description,
            "address": self.address,
            "regularPrice": self.regular_price,
            "discountPrice": self.discount_price,
            "bathrooms": self.bathrooms,
            "bedrooms": self.bedrooms,
            "furnished": self.furnished,
            "parking": self.parking,
            "type": self.type,
            "offer": self.offer,
            "imageUrls": list(self.image_urls),
            "userRef": self.user_ref,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "Listing":
        """Build a Listing from an API/seed-file object. Missing fields take defaults."""
        listing = cls(
            id=str(data["_id"]),
            name=str(data.get("name", "")),
            address=str(data.get("address", "")),
            description=str(data.get("description", "")),
            regular_price=float(data.get("regularPrice", 0) or 0),
            discount_price=float(data.get("discountPrice", 0) or 0),
            bathrooms=int(data.get("bathrooms", 1) or 0),
            bedrooms=int(data.get("bedrooms", 1) or 0),
            furnished=bool(data.get("furnished", False)),
            parking=bool(data.get("parking", False)),
            type=str(data.get("type", "rent")),
            offer=bool(data.get("offer", False)),
            image_urls=[str(u) for u in data.get("imageUrls") or []],
            user_ref=data.get("userRef"),
        )
        if data.get("createdAt"):
            listing.created_at = str(data["createdAt"])
        if data.get("updatedAt"):
            listing.updated_at = str(data["updatedAt"])
        return listing


# ---------------------------------------------------------------------------
# Listing summaries: what the search flow accumulates, never mutated
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ListingSummary:
    """A result card: the subset of a listing shown in search results."""

    id: str
    name: str
    address: str = ""
    type: str = "rent"
    regular_price: float = 0.0
    discount_price: float = 0.0
    offer: bool = False
    parking: bool = False
    furnished: bool = False
    bedrooms: int = 0
    bathrooms: int = 0
    image_urls: tuple[str, ...] = ()

    @property
    def cover_image(self) -> Optional[str]:
        return self.image_urls[0] if self.image_urls else None

    @property
    def display_price(self) -> float:
        """Price shown on the card: the discounted one when on offer."""
        return self.discount_price if self.offer else self.regular_price

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "ListingSummary":
        """Build a summary from one element of the listing store's JSON array."""
        return cls(
            id=str(data["_id"]),
            name=str(data.get("name", "")),
            address=str(data.get("address", "")),
            type=str(data.get("type", "rent")),
            regular_price=float(data.get("regularPrice", 0) or 0),
            discount_price=float(data.get("discountPrice", 0) or 0),
            offer=bool(data.get("offer", False)),
            parking=bool(data.get("parking", False)),
            furnished=bool(data.get("furnished", False)),
            bedrooms=int(data.get("bedrooms", 0) or 0),
            bathrooms=int(data.get("bathrooms", 0) or 0),
            image_urls=tuple(str(u) for u in data.get("imageUrls") or []),
        )
