"""
Schema of the listing store.

The schema is versioned via the ``user_version`` pragma so later
migrations can be detected on existing databases.

Tables:
    listings: property listings served to the search flow
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from estatesearch.storage.connection import get_connection

logger = logging.getLogger(__name__)

# Current schema version. Bump when adding migrations.
SCHEMA_VERSION = 1

_LISTINGS_DDL = """
CREATE TABLE IF NOT EXISTS listings (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    description     TEXT DEFAULT '',
    address         TEXT DEFAULT '',
    regular_price   REAL DEFAULT 0,
    discount_price  REAL DEFAULT 0,
    bathrooms       INTEGER DEFAULT 1,
    bedrooms        INTEGER DEFAULT 1,
    furnished       INTEGER DEFAULT 0,
    parking         INTEGER DEFAULT 0,
    type            TEXT NOT NULL DEFAULT 'rent',
    offer           INTEGER DEFAULT 0,
    image_urls      TEXT DEFAULT '[]',
    user_ref        TEXT,
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL
);
"""

_LISTINGS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_listings_type ON listings(type);",
    "CREATE INDEX IF NOT EXISTS idx_listings_created_at ON listings(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_listings_regular_price ON listings(regular_price);",
]


def initialize_database(db_path: Optional[Path] = None) -> None:
    """Create the listings table and its sort/filter indexes unless they exist."""
    conn = get_connection(db_path)
    existing = get_schema_version(db_path)
    if existing > SCHEMA_VERSION:
        logger.warning(
            "Database schema version %d is newer than this code (%d)", existing, SCHEMA_VERSION
        )

    with conn:
        conn.execute(_LISTINGS_DDL)
        for statement in _LISTINGS_INDEXES:
            conn.execute(statement)
        if existing < SCHEMA_VERSION:
            conn.execute(f"PRAGMA user_version={SCHEMA_VERSION}")
            logger.info("Listing schema set to version %d (was %d)", SCHEMA_VERSION, existing)


def get_schema_version(db_path: Optional[Path] = None) -> int:
    """The ``user_version`` recorded in the database, 0 for a fresh file."""
    row = get_connection(db_path).execute("PRAGMA user_version").fetchone()
    return row[0] if row else 0
