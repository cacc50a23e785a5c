"""
CRUD and query operations for the listings table.

Listing creation and editing belong to the listing management side of
the product; the search flow only calls ``search`` and ``get_by_id``.
``insert``/``insert_many`` exist for seeding and tests.

All methods accept an optional db_path for testability.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from estatesearch.search.query_compiler import StoreQuery
from estatesearch.storage.connection import get_connection
from estatesearch.storage.models import Listing

logger = logging.getLogger(__name__)

_INSERT_SQL = """
    INSERT OR IGNORE INTO listings
        (id, name, description, address, regular_price, discount_price,
         bathrooms, bedrooms, furnished, parking, type, offer,
         image_urls, user_ref, created_at, updated_at)
    VALUES
        (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _listing_to_row(listing: Listing) -> tuple:
    return (
        listing.id,
        listing.name,
        listing.description,
        listing.address,
        listing.regular_price,
        listing.discount_price,
        listing.bathrooms,
        listing.bedrooms,
        int(listing.furnished),
        int(listing.parking),
        listing.type,
        int(listing.offer),
        json.dumps(listing.image_urls),
        listing.user_ref,
        listing.created_at,
        listing.updated_at,
    )


class ListingStore:
    """CRUD and search interface for the listings table."""

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self._db_path = db_path

    @property
    def _conn(self):
        return get_connection(self._db_path)

    # ----- Write operations -----

    def insert(self, listing: Listing) -> bool:
        """
        Insert a single listing. Returns True if inserted, False if a
        listing with the same id already exists.
        """
        with self._conn:
            cursor = self._conn.execute(_INSERT_SQL, _listing_to_row(listing))
            inserted = cursor.rowcount > 0
            if inserted:
                logger.debug("Inserted listing: %s", listing.id)
            else:
                logger.debug("Skipped duplicate listing: %s", listing.id)
            return inserted

    def insert_many(self, listings: list[Listing]) -> int:
        """
        Insert multiple listings. Returns the count of newly inserted rows.
        Duplicates are silently skipped.
        """
        rows = [_listing_to_row(listing) for listing in listings]
        with self._conn:
            cursor = self._conn.executemany(_INSERT_SQL, rows)
            count = cursor.rowcount
            logger.info("Bulk insert: %d new listings (of %d attempted)", count, len(listings))
            return count

    # ----- Read operations -----

    def _row_to_listing(self, row) -> Listing:
        """Convert a sqlite3.Row to a Listing dataclass."""
        return Listing(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            address=row["address"] or "",
            regular_price=row["regular_price"],
            discount_price=row["discount_price"],
            bathrooms=row["bathrooms"],
            bedrooms=row["bedrooms"],
            furnished=bool(row["furnished"]),
            parking=bool(row["parking"]),
            type=row["type"],
            offer=bool(row["offer"]),
            image_urls=json.loads(row["image_urls"] or "[]"),
            user_ref=row["user_ref"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_id(self, listing_id: str) -> Optional[Listing]:
        """Fetch a single listing by id."""
        row = self._conn.execute(
            "SELECT * FROM listings WHERE id = ?", (listing_id,)
        ).fetchone()
        return self._row_to_listing(row) if row else None

    def search(self, query: StoreQuery) -> list[Listing]:
        """Run a compiled query and return one page of listings, in sort order."""
        sql, args = query.to_sql()
        rows = self._conn.execute(sql, args).fetchall()
        logger.debug(
            "Listing search skip=%d limit=%d returned %d rows",
            query.skip, query.limit, len(rows),
        )
        return [self._row_to_listing(r) for r in rows]

    def count(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) AS cnt FROM listings").fetchone()
        return row["cnt"]

    def count_by_type(self) -> dict[str, int]:
        """Number of listings per type, e.g. ``{"rent": 12, "sale": 4}``."""
        rows = self._conn.execute(
            "SELECT type, COUNT(*) AS cnt FROM listings GROUP BY type ORDER BY type"
        ).fetchall()
        return {row["type"]: row["cnt"] for row in rows}
