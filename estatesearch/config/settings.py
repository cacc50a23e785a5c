"""
Configuration for estatesearch.

Every tunable of the search flow, the SQLite store and the store client
is a field on one of the frozen dataclasses below. Code reads them through
``get_settings()``; tests build ``Settings(...)`` directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


def _project_root() -> Path:
    """The nearest ancestor directory holding pyproject.toml, else the checkout root."""
    here = Path(__file__).resolve()
    for candidate in here.parents:
        if (candidate / "pyproject.toml").exists():
            return candidate
    return here.parents[2]


@dataclass(frozen=True)
class SearchSettings:
    """Settings for the listing search and pagination flow."""

    # Records per full listing page. "Show more" is offered when a page
    # comes back with more than page_size - 1 records.
    page_size: int = 9

    # Records per curated feed on the home page
    home_feed_limit: int = 4

    # Client-side path the search form navigates to
    search_path: str = "/search"

    # Largest limit the store API accepts in a single request
    max_page_size: int = 100

    # Longer search terms are truncated by the store API
    max_search_term_length: int = 200


@dataclass(frozen=True)
class StorageSettings:
    """Settings for SQLite storage."""

    # Path to the SQLite database file (relative to project root resolved at runtime)
    db_name: str = "estatesearch.db"

    # SQLite journal mode
    journal_mode: str = "WAL"

    # SQLite busy timeout (milliseconds): how long to wait for a locked DB
    busy_timeout_ms: int = 5000


@dataclass(frozen=True)
class StoreClientSettings:
    """Settings for the HTTP client that talks to the listing store API."""

    # Scheme, host and port of the listing store API
    base_url: str = "http://127.0.0.1:8000"

    # Path of the listing query endpoint
    listing_path: str = "/api/listing/get"

    # Request timeout (seconds). A timeout resolves the fetch as a failure.
    request_timeout: float = 10.0

    # User-Agent string sent with every request
    user_agent: str = "estatesearch/0.1"


@dataclass
class Settings:
    """
    All settings for one process.

    Runtime files live under ``<project_root>/data``: the listing database
    in ``data/db`` and log files in ``data/logs``.
    """

    project_root: Path = field(default_factory=_project_root)
    search: SearchSettings = field(default_factory=SearchSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    store_client: StoreClientSettings = field(default_factory=StoreClientSettings)

    @property
    def data_dir(self) -> Path:
        return self.project_root / "data"

    @property
    def db_path(self) -> Path:
        """The SQLite file backing the listing store."""
        return self.data_dir / "db" / self.storage.db_name

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / "logs"

    def ensure_dirs(self) -> None:
        for directory in (self.db_path.parent, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide Settings, with its data directories created."""
    settings = Settings()
    settings.ensure_dirs()
    return settings
